from django.db import transaction
from rest_framework import serializers
from falbites.core.serializers import DocumentSerializer
from falbites.delivery.models import DeliveryPartner
from falbites.users.serializers import CustomerSummarySerializer
from falbites.vendors.models import Vendor
from .models import Category, TopCategory, SubCategory, Brand, Product, ProductType, CategoryChoice, ProductOrder


class CategorySummarySerializer(serializers.ModelSerializer):
    _id = serializers.IntegerField(source='pk', read_only=True)

    class Meta:
        model = Category
        fields = ['_id', 'title', 'image']


class TopCategorySummarySerializer(CategorySummarySerializer):
    class Meta(CategorySummarySerializer.Meta):
        model = TopCategory


class SubCategorySummarySerializer(CategorySummarySerializer):
    class Meta(CategorySummarySerializer.Meta):
        model = SubCategory


class BrandSummarySerializer(CategorySummarySerializer):
    class Meta(CategorySummarySerializer.Meta):
        model = Brand


class CategorySerializer(DocumentSerializer):
    class Meta:
        model = Category
        fields = ['_id', 'title', 'image', 'createdAt', 'updatedAt']
        extra_kwargs = {'image': {'required': False}}


class TopCategorySerializer(DocumentSerializer):
    categoryId = serializers.PrimaryKeyRelatedField(source='category', queryset=Category.objects.all())
    category = CategorySummarySerializer(read_only=True)

    class Meta:
        model = TopCategory
        fields = ['_id', 'title', 'image', 'categoryId', 'category', 'createdAt', 'updatedAt']
        extra_kwargs = {'image': {'required': False}}


class SubCategorySerializer(DocumentSerializer):
    topCategoryId = serializers.PrimaryKeyRelatedField(source='top_category', queryset=TopCategory.objects.all())
    topCategory = TopCategorySummarySerializer(source='top_category', read_only=True)

    class Meta:
        model = SubCategory
        fields = ['_id', 'title', 'image', 'topCategoryId', 'topCategory', 'createdAt', 'updatedAt']
        extra_kwargs = {'image': {'required': False}}


class BrandSerializer(DocumentSerializer):
    class Meta:
        model = Brand
        fields = ['_id', 'title', 'image', 'createdAt', 'updatedAt']
        extra_kwargs = {
            'title': {'validators': []},
            'image': {'required': False},
        }

    def validate_title(self, value):
        value = value.strip()
        existing = Brand.objects.filter(title__iexact=value)
        if self.instance is not None:
            existing = existing.exclude(pk=self.instance.pk)
        if existing.exists():
            raise serializers.ValidationError('Brand with this title already exists')
        return value


class ProductTypeSerializer(serializers.ModelSerializer):
    _id = serializers.IntegerField(source='pk', read_only=True)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)
    withoutDiscountPrice = serializers.DecimalField(
        source='without_discount_price', max_digits=10, decimal_places=2, min_value=0
    )
    smallDescription = serializers.CharField(
        source='small_description', max_length=200, required=False, allow_blank=True
    )
    imageUrl = serializers.CharField(source='image_url', max_length=500, required=False, allow_blank=True)

    class Meta:
        model = ProductType
        fields = ['_id', 'title', 'price', 'withoutDiscountPrice', 'smallDescription', 'imageUrl']


class ProductSerializer(DocumentSerializer):
    """Read shape with category, brand and variants inlined"""
    category = CategorySummarySerializer(read_only=True)
    topCategory = TopCategorySummarySerializer(source='top_category', read_only=True)
    subCategory = SubCategorySummarySerializer(source='sub_category', read_only=True)
    brand = BrandSummarySerializer(read_only=True)
    tag = serializers.ListField(source='tags', child=serializers.CharField(), read_only=True)
    weightOrCount = serializers.CharField(source='weight_or_count', read_only=True)
    types = ProductTypeSerializer(many=True, read_only=True)
    creatorId = serializers.PrimaryKeyRelatedField(source='creator', read_only=True)

    class Meta:
        model = Product
        fields = ['_id', 'title', 'description', 'category', 'topCategory', 'subCategory', 'brand',
                  'tag', 'weightOrCount', 'types', 'status', 'creatorId', 'createdAt', 'updatedAt']


class ProductWriteSerializer(serializers.ModelSerializer):
    """
    Create/update payload. References are ids; ``types`` replaces the whole
    variant list when present. Uploaded variant images arrive through the
    ``type_images`` context entry, matched to types by position.
    """
    category = serializers.PrimaryKeyRelatedField(queryset=Category.objects.all())
    topCategory = serializers.PrimaryKeyRelatedField(
        source='top_category', queryset=TopCategory.objects.all(), required=False, allow_null=True
    )
    subCategory = serializers.PrimaryKeyRelatedField(
        source='sub_category', queryset=SubCategory.objects.all(), required=False, allow_null=True
    )
    brand = serializers.PrimaryKeyRelatedField(queryset=Brand.objects.all(), required=False, allow_null=True)
    tag = serializers.ListField(source='tags', child=serializers.CharField(max_length=50), required=False)
    weightOrCount = serializers.CharField(source='weight_or_count', max_length=100, required=False, allow_blank=True)
    types = ProductTypeSerializer(many=True)
    creatorId = serializers.PrimaryKeyRelatedField(
        source='creator', queryset=Vendor.objects.all(), required=False, allow_null=True
    )

    class Meta:
        model = Product
        fields = ['title', 'description', 'category', 'topCategory', 'subCategory', 'brand',
                  'tag', 'weightOrCount', 'types', 'creatorId']

    def validate_types(self, value):
        if not value:
            raise serializers.ValidationError('At least one product type is required')
        return value

    def create(self, validated_data):
        types = validated_data.pop('types')
        validated_data['status'] = 'pending' if validated_data.get('creator') else 'success'
        with transaction.atomic():
            product = Product.objects.create(**validated_data)
            self._save_types(product, types)
        return product

    def update(self, instance, validated_data):
        types = validated_data.pop('types', None)
        with transaction.atomic():
            for attr, value in validated_data.items():
                setattr(instance, attr, value)
            instance.save()
            if types is not None:
                instance.types.all().delete()
                self._save_types(instance, types)
        return instance

    def _save_types(self, product, types):
        images = self.context.get('type_images') or []
        for position, data in enumerate(types):
            if position < len(images) and images[position]:
                data['image_url'] = images[position]
            ProductType.objects.create(product=product, position=position, **data)


class ProductStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(
        choices=[choice for choice, _ in Product.STATUS_CHOICES],
        error_messages={'invalid_choice': 'Invalid status. Allowed values: pending, success, failed'},
    )


class CategoryChoiceSerializer(DocumentSerializer):
    """
    Product choices point at a product, subscription choices at a subscription
    category. On partial updates the stored values fill in what the request omits.
    """
    productId = serializers.PrimaryKeyRelatedField(
        source='product', queryset=Product.objects.all(), required=False, allow_null=True
    )
    category = serializers.CharField(max_length=100, required=False, allow_blank=True)

    class Meta:
        model = CategoryChoice
        fields = ['_id', 'title', 'image', 'types', 'productId', 'category', 'createdAt', 'updatedAt']
        extra_kwargs = {'image': {'required': False}}

    def validate_title(self, value):
        return value.strip()

    def validate(self, attrs):
        def current(name, default):
            if name in attrs:
                return attrs[name]
            return getattr(self.instance, name) if self.instance is not None else default

        kind = current('types', 'product')
        if kind == 'product' and current('product', None) is None:
            raise serializers.ValidationError({'productId': 'A product is required for product choices'})
        if kind == 'subscription' and not (current('category', '') or '').strip():
            raise serializers.ValidationError({'category': 'A category is required for subscription choices'})
        return attrs


class OrderedProductSerializer(serializers.ModelSerializer):
    _id = serializers.IntegerField(source='pk', read_only=True)
    weightOrCount = serializers.CharField(source='weight_or_count', read_only=True)
    creatorId = serializers.PrimaryKeyRelatedField(source='creator', read_only=True)

    class Meta:
        model = Product
        fields = ['_id', 'title', 'weightOrCount', 'creatorId']


class ProductOrderSerializer(DocumentSerializer):
    """Read shape of a product order; only status, delivery date and partner are writable"""
    userId = CustomerSummarySerializer(source='user', read_only=True)
    productData = OrderedProductSerializer(source='product', read_only=True)
    deliveryPartnerId = serializers.PrimaryKeyRelatedField(
        source='delivery_partner', queryset=DeliveryPartner.objects.all(), required=False, allow_null=True
    )
    selectedType = serializers.CharField(source='selected_type', read_only=True)
    quantity = serializers.IntegerField(read_only=True)
    totalPrice = serializers.DecimalField(source='total_price', max_digits=10, decimal_places=2, read_only=True)
    status = serializers.ChoiceField(choices=ProductOrder.STATUS_CHOICES, required=False)
    deliveryDate = serializers.DateField(source='delivery_date', required=False, allow_null=True)
    orderDate = serializers.DateTimeField(source='order_date', read_only=True)
    paymentMethod = serializers.CharField(source='payment_method', read_only=True)
    franchiseId = serializers.PrimaryKeyRelatedField(source='franchise', read_only=True)

    class Meta:
        model = ProductOrder
        fields = ['_id', 'userId', 'productData', 'deliveryPartnerId', 'selectedType', 'quantity', 'totalPrice',
                  'status', 'deliveryDate', 'orderDate', 'paymentMethod', 'address', 'franchiseId',
                  'createdAt', 'updatedAt']
        read_only_fields = ['address']
