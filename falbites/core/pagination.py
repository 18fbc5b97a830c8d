from django.core.paginator import EmptyPage, Paginator


def positive_int(value, default):
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number > 0 else default


def paginate(queryset, params, default_limit=50):
    """
    Slice a queryset by ``page``/``limit`` query params.

    Returns ``(items, meta)`` where meta is ``{"current", "pages", "total"}``.
    A page past the end yields no items rather than repeating the last page.
    """
    page = positive_int(params.get('page'), 1)
    limit = positive_int(params.get('limit'), default_limit)

    paginator = Paginator(queryset, limit)
    try:
        items = list(paginator.page(page).object_list)
    except EmptyPage:
        items = []

    total = paginator.count
    return items, {
        'current': page,
        'pages': paginator.num_pages if total else 0,
        'total': total,
    }
