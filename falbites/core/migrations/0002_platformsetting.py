import django.core.validators
from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ('core', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='PlatformSetting',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('maintenance', models.BooleanField(default=False)),
                ('links', models.JSONField(blank=True, default=dict)),
                ('recharge_options', models.JSONField(blank=True, default=list)),
                ('min_add_money', models.PositiveIntegerField(default=1, validators=[django.core.validators.MinValueValidator(1)])),
                ('max_refers', models.PositiveIntegerField(default=0)),
                ('refer_reward', models.DecimalField(decimal_places=2, default=0, max_digits=10, validators=[django.core.validators.MinValueValidator(0)])),
                ('delivery_timing', models.CharField(default='5:00 AM to 8:30 PM', max_length=50)),
                ('max_subscription_update_or_cancel_time', models.CharField(default='8:30 PM', max_length=10)),
                ('bottom_image', models.CharField(blank=True, default='', max_length=500)),
                ('refer_image', models.CharField(blank=True, default='', max_length=500)),
                ('refer_page_image_attachment', models.CharField(blank=True, default='', max_length=500)),
                ('healthy_banner', models.CharField(blank=True, default='', max_length=500)),
                ('search_background_image', models.CharField(blank=True, default='', max_length=500)),
                ('top_banner_image', models.CharField(blank=True, default='', max_length=500)),
                ('platform_fees', models.DecimalField(decimal_places=2, default=0, max_digits=10, validators=[django.core.validators.MinValueValidator(0)])),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'settings',
            },
        ),
    ]
