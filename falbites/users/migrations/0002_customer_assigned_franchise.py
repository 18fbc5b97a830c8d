import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ('users', '0001_initial'),
        ('franchises', '0001_initial'),
    ]

    operations = [
        migrations.AddField(
            model_name='customer',
            name='assigned_franchise',
            field=models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='customers', to='franchises.franchise'),
        ),
    ]
