import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('franchises', '0001_initial'),
        ('subscriptions', '0001_initial'),
        ('users', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='BulkDelivery',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255)),
                ('address', models.TextField()),
                ('phone_number', models.CharField(max_length=15)),
                ('delivery_date', models.DateField()),
                ('image_url', models.URLField(max_length=500)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('delivered', 'Delivered'), ('cancelled', 'Cancelled')], default='pending', max_length=20)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name_plural': 'Bulk deliveries',
                'db_table': 'bulk_deliveries',
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='DeliveryPartner',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('first_name', models.CharField(max_length=100)),
                ('last_name', models.CharField(max_length=100)),
                ('mobile_number', models.CharField(max_length=10, unique=True, validators=[django.core.validators.RegexValidator(message='Mobile number must be a valid 10 digit Indian number', regex='^[6-9]\\d{9}$')])),
                ('vehicle_type', models.CharField(max_length=50)),
                ('city', models.CharField(max_length=100)),
                ('branch', models.CharField(max_length=100)),
                ('profile_image_url', models.URLField(blank=True, default='', max_length=500)),
                ('rank', models.CharField(choices=[('Bronze', 'Bronze'), ('Platinum', 'Platinum'), ('Diamond', 'Diamond')], default='Bronze', max_length=20)),
                ('wallet', models.DecimalField(decimal_places=2, default=0, max_digits=12)),
                ('online_status', models.BooleanField(default=False)),
                ('onboarding_status', models.CharField(choices=[('pending', 'Pending'), ('approved', 'Approved'), ('rejected', 'Rejected')], default='pending', max_length=20)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('assigned_branch', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='delivery_partners', to='franchises.franchise')),
            ],
            options={
                'db_table': 'delivery_partners',
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='BoxReview',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('box_image', models.URLField(blank=True, default='', max_length=500)),
                ('remark', models.CharField(blank=True, default='', max_length=500)),
                ('delivery_time', models.CharField(blank=True, default='', max_length=20)),
                ('is_box_picked', models.BooleanField(default=False)),
                ('is_box_cleaned', models.BooleanField(default=False)),
                ('status', models.CharField(blank=True, default='', max_length=50)),
                ('date', models.DateTimeField(default=django.utils.timezone.now)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('order', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='box_reviews', to='subscriptions.subscriptionorder')),
                ('partner', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='box_reviews', to='delivery.deliverypartner')),
            ],
            options={
                'db_table': 'box_reviews',
                'ordering': ['-date'],
            },
        ),
        migrations.CreateModel(
            name='PayoutTransaction',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('transaction_id', models.CharField(max_length=20, unique=True)),
                ('month_name', models.CharField(max_length=20)),
                ('date', models.DateField()),
                ('amount', models.DecimalField(decimal_places=2, max_digits=12, validators=[django.core.validators.MinValueValidator(1)])),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('delivery_partner', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='payouts', to='delivery.deliverypartner')),
            ],
            options={
                'db_table': 'payout_transactions',
                'ordering': ['-date', '-created_at'],
            },
        ),
        migrations.CreateModel(
            name='UnavailableLocation',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('city', models.CharField(max_length=100)),
                ('area', models.CharField(max_length=255)),
                ('pin_code', models.CharField(max_length=10)),
                ('reason', models.CharField(default='Service currently unavailable', max_length=255)),
                ('date', models.DateTimeField(default=django.utils.timezone.now)),
                ('added_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='unavailable_locations', to='users.customer')),
            ],
            options={
                'db_table': 'unavailable_locations',
                'ordering': ['-date'],
            },
        ),
    ]
