"""
Figures for the admin dashboard home page.

Months and weeks follow the server's local time zone. Weeks start on Sunday,
so week 1 of a month runs from the 1st to the first Saturday.
"""
import calendar
from datetime import date, datetime, time
from decimal import Decimal

from django.db.models import Count, DecimalField, Sum
from django.db.models.functions import TruncDate, TruncMonth
from django.utils import timezone

from falbites.catalog.models import Category, Product
from falbites.subscriptions.models import SubscriptionOrder
from falbites.users.models import Customer

ORDER_STATUS_COLORS = {
    'Active': '#00fe93',
    'Inactive': '#fe6c00',
    'Cancelled': '#fe1e00',
}


def percent_change(current, previous):
    if not previous:
        return '0%' if not current else '100%'
    return f"{(current - previous) / previous * 100:.1f}%"


def format_inr(amount):
    """Rupee amount with Indian digit grouping: 1234567 -> '₹12,34,567'"""
    amount = Decimal(amount).quantize(Decimal('0.01'))
    whole, _, fraction = f"{abs(amount):.2f}".partition('.')
    head, tail = whole[:-3], whole[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    grouped = ','.join(groups + [tail]) if groups else tail
    if fraction != '00':
        grouped = f"{grouped}.{fraction.rstrip('0')}"
    return f"{'-' if amount < 0 else ''}₹{grouped}"


def month_start(year, month):
    return date(year, month, 1)


def previous_month(first):
    if first.month == 1:
        return date(first.year - 1, 12, 1)
    return date(first.year, first.month - 1, 1)


def next_month(first):
    if first.month == 12:
        return date(first.year + 1, 1, 1)
    return date(first.year, first.month + 1, 1)


def first_weekday_offset(first):
    """Days between the Sunday that starts week 1 and the 1st of the month"""
    return (first.weekday() + 1) % 7


def week_of_month(day):
    offset = first_weekday_offset(day.replace(day=1))
    return (day.day + offset + 6) // 7


def weeks_in_month(first):
    last_day = calendar.monthrange(first.year, first.month)[1]
    return (last_day + first_weekday_offset(first) + 6) // 7


def aware(day):
    return timezone.make_aware(datetime.combine(day, time.min))


def created_between(queryset, start, end):
    return queryset.filter(created_at__gte=aware(start), created_at__lt=aware(end))


def total_amount(queryset):
    total = queryset.aggregate(total=Sum('final_amount', output_field=DecimalField()))['total']
    return total or Decimal('0')


def status_counts(queryset):
    counts = dict.fromkeys(ORDER_STATUS_COLORS, 0)
    for row in queryset.values('subscription_status').annotate(count=Count('id')):
        if row['subscription_status'] in counts:
            counts[row['subscription_status']] = row['count']
    return counts


def weekly_revenue(queryset, first):
    revenue = {}
    rows = created_between(queryset, first, next_month(first)).annotate(
        day=TruncDate('created_at')
    ).values('day').annotate(total=Sum('final_amount', output_field=DecimalField()))
    for row in rows:
        week = week_of_month(row['day'])
        revenue[week] = revenue.get(week, Decimal('0')) + (row['total'] or Decimal('0'))
    return revenue


def dashboard_stats(branch_id=None, today=None):
    """Summary cards, monthly sales, order status split and weekly revenue"""
    today = today or timezone.localdate()
    this_month = month_start(today.year, today.month)
    last_month = previous_month(this_month)
    following = next_month(this_month)

    orders = SubscriptionOrder.objects.all()
    if branch_id is not None:
        orders = orders.filter(franchise_id=branch_id)

    new_customers = created_between(Customer.objects.all(), this_month, following).count()
    last_month_customers = created_between(Customer.objects.all(), last_month, this_month).count()
    products = Product.objects.count()
    new_products = created_between(Product.objects.all(), this_month, following).count()
    categories = Category.objects.count()

    total_sales = total_amount(orders)
    last_month_sales = total_amount(created_between(orders, last_month, this_month))
    statuses = status_counts(created_between(orders, this_month, following))
    last_month_statuses = status_counts(created_between(orders, last_month, this_month))
    order_count = sum(statuses.values())
    last_month_order_count = sum(last_month_statuses.values())

    stats = [
        {
            'title': 'Total Sales',
            'value': format_inr(total_sales),
            'icon': 'DollarSign',
            'change': f"{percent_change(total_sales, last_month_sales)} from last month",
        },
        {
            'title': 'Orders',
            'value': str(order_count),
            'icon': 'ShoppingCart',
            'change': f"{percent_change(order_count, last_month_order_count)} from last month",
        },
        {
            'title': 'Products',
            'value': str(products),
            'icon': 'Package',
            'change': f"+{new_products} new this month" if new_products else 'No new products',
        },
        {
            'title': 'Categories',
            'value': str(categories),
            'icon': 'BarChart3',
            'change': 'No change',
        },
        {
            'title': 'New Customers',
            'value': str(new_customers),
            'icon': 'Users',
            'change': f"{percent_change(new_customers, last_month_customers)} from last month",
        },
        {
            'title': 'Active Subscriptions',
            'value': str(statuses['Active']),
            'icon': 'CheckCircle',
            'change': f"{percent_change(statuses['Active'], last_month_statuses['Active'])} from last month",
        },
    ]

    monthly = {}
    rows = created_between(orders, date(today.year, 1, 1), date(today.year + 1, 1, 1)).annotate(
        month=TruncMonth('created_at')
    ).values('month').annotate(total=Sum('final_amount', output_field=DecimalField()))
    for row in rows:
        monthly[row['month'].month] = row['total'] or Decimal('0')
    sales_data = [
        {'month': calendar.month_abbr[month], 'sales': float(monthly.get(month, 0))}
        for month in range(1, 13)
    ]

    order_data = [
        {'name': name, 'value': statuses[name], 'color': color}
        for name, color in ORDER_STATUS_COLORS.items()
    ]

    current_weeks = weekly_revenue(orders, this_month)
    previous_weeks = weekly_revenue(orders, last_month)
    revenue_data = []
    for week in range(1, weeks_in_month(this_month) + 1):
        current = current_weeks.get(week, Decimal('0'))
        previous = previous_weeks.get(week, Decimal('0'))
        revenue_data.append({
            'week': f"Week {week}",
            'revenue': float(current),
            'change': f"{percent_change(current, previous)} from last month",
        })

    return {
        'stats': stats,
        'salesData': sales_data,
        'orderData': order_data,
        'revenueData': revenue_data,
    }
