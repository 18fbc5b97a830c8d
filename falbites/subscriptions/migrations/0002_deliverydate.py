import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ('delivery', '0001_initial'),
        ('subscriptions', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='DeliveryDate',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('date', models.DateField()),
                ('status', models.CharField(choices=[('Scheduled', 'Scheduled'), ('order placed', 'Order placed'), ('pending', 'Pending'), ('in transit', 'In transit'), ('out-for-delivery', 'Out for delivery'), ('delivered', 'Delivered'), ('cancelled', 'Cancelled'), ('paused', 'Paused'), ('non delivery day', 'Non delivery day')], default='pending', max_length=30)),
                ('description', models.CharField(blank=True, default='', max_length=255)),
                ('delivery_time', models.CharField(blank=True, default='', max_length=20)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('delivery_partner', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='deliveries', to='delivery.deliverypartner')),
                ('order', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='delivery_dates', to='subscriptions.subscriptionorder')),
            ],
            options={
                'db_table': 'subscription_delivery_dates',
                'ordering': ['date', 'id'],
                'constraints': [models.UniqueConstraint(fields=('order', 'date'), name='unique_delivery_date_per_order')],
            },
        ),
    ]
