import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('users', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Franchise',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=100)),
                ('city_name', models.CharField(max_length=100)),
                ('branch_name', models.CharField(max_length=100)),
                ('location_name', models.CharField(blank=True, default='', max_length=255)),
                ('latitude', models.FloatField(blank=True, null=True)),
                ('longitude', models.FloatField(blank=True, null=True)),
                ('total_delivery_radius', models.FloatField(help_text='in km')),
                ('free_delivery_radius', models.FloatField(help_text='in km')),
                ('charge_per_extra_km', models.FloatField(help_text='in rupees')),
                ('polygon_coordinates', models.JSONField(blank=True, default=list)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('assigned_manager', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='managed_franchises', to='users.customer')),
            ],
            options={
                'db_table': 'franchises',
                'ordering': ['name'],
            },
        ),
    ]
