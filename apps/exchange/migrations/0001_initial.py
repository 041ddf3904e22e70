import apps.exchange.infrastructure.persistence.fields
import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Currency',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('name', models.CharField(db_index=True, max_length=50)),
                ('symbol', models.CharField(max_length=10)),
                ('is_active', models.BooleanField(default=True, help_text='Inactive currencies are hidden from listings and rejected by exchanges.')),
            ],
            options={
                'verbose_name_plural': 'currencies',
            },
        ),
        migrations.CreateModel(
            name='ExchangeHistory',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('rate', apps.exchange.infrastructure.persistence.fields.ExactDecimalField(decimal_places=6, max_digits=18)),
                ('amount', apps.exchange.infrastructure.persistence.fields.ExactDecimalField(decimal_places=6, max_digits=20)),
                ('result_amount', apps.exchange.infrastructure.persistence.fields.ExactDecimalField(decimal_places=12, max_digits=38)),
                ('exchanged_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now)),
                ('source_currency', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='source_exchanges', to='exchange.currency')),
                ('target_currency', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='target_exchanges', to='exchange.currency')),
            ],
            options={
                'verbose_name_plural': 'exchange history',
                'ordering': ['-exchanged_at', '-id'],
            },
        ),
    ]
