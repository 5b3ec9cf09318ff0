import django.db.models.deletion
from decimal import Decimal
from django.conf import settings
from django.db import migrations, models


def document_fields():
    return [
        ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
        ('document_number', models.CharField(max_length=50, unique=True)),
        ('posting_date', models.DateField(blank=True, null=True)),
        ('document_date', models.DateField(blank=True, null=True)),
        ('remarks', models.TextField(blank=True)),
        ('freight', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14)),
        ('rounding', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14)),
        ('total_before_discount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14)),
        ('total_discount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14)),
        ('gst_total', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14)),
        ('grand_total', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14)),
        ('created_at', models.DateTimeField(auto_now_add=True)),
        ('updated_at', models.DateTimeField(auto_now=True)),
        ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
    ]


def line_fields():
    return [
        ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
        ('description', models.CharField(blank=True, max_length=255)),
        ('quantity', models.DecimalField(decimal_places=3, max_digits=14)),
        ('unit_price', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14)),
        ('discount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14)),
        ('tax_option', models.CharField(choices=[('GST', 'GST'), ('IGST', 'IGST')], default='GST', max_length=5)),
        ('gst_rate', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=5)),
        ('igst_rate', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=5)),
        ('price_after_discount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14)),
        ('total_amount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14)),
        ('gst_amount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14)),
        ('cgst_amount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14)),
        ('sgst_amount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14)),
        ('igst_amount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14)),
        ('item', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='+', to='catalog.item')),
        ('warehouse', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to='locations.warehouse')),
    ]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('catalog', '0001_initial'),
        ('locations', '0001_initial'),
        ('parties', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='SalesQuotation',
            fields=document_fields() + [
                ('contact_person', models.CharField(blank=True, max_length=200)),
                ('ref_number', models.CharField(blank=True, max_length=100)),
                ('status', models.CharField(choices=[('Open', 'Open'), ('Closed', 'Closed'), ('Cancelled', 'Cancelled'), ('Converted', 'Converted')], default='Open', max_length=20)),
                ('valid_until', models.DateField(blank=True, null=True)),
                ('customer', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='sales_quotations', to='parties.customer')),
                ('sales_employee', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='sales_quotations', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'sales_quotations',
                'ordering': ['-created_at'],
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='SalesQuotationItem',
            fields=line_fields() + [
                ('quotation', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='items', to='sales.salesquotation')),
            ],
            options={
                'db_table': 'sales_quotation_items',
                'ordering': ['id'],
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='SalesOrder',
            fields=document_fields() + [
                ('contact_person', models.CharField(blank=True, max_length=200)),
                ('ref_number', models.CharField(blank=True, max_length=100)),
                ('status', models.CharField(choices=[('Open', 'Open'), ('Closed', 'Closed'), ('Cancelled', 'Cancelled')], default='Open', max_length=20)),
                ('delivery_date', models.DateField(blank=True, null=True)),
                ('customer', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='sales_orders', to='parties.customer')),
                ('quotation', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='orders', to='sales.salesquotation')),
                ('sales_employee', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='sales_orders', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'sales_orders',
                'ordering': ['-created_at'],
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='SalesOrderItem',
            fields=line_fields() + [
                ('order', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='items', to='sales.salesorder')),
            ],
            options={
                'db_table': 'sales_order_items',
                'ordering': ['id'],
                'abstract': False,
            },
        ),
    ]
