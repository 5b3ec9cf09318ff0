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
            name='PurchaseQuotation',
            fields=document_fields() + [
                ('contact_person', models.CharField(blank=True, max_length=200)),
                ('ref_number', models.CharField(blank=True, max_length=100)),
                ('status', models.CharField(choices=[('Open', 'Open'), ('Closed', 'Closed'), ('Cancelled', 'Cancelled'), ('Converted', 'Converted')], default='Open', max_length=20)),
                ('valid_until', models.DateField(blank=True, null=True)),
                ('supplier', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='purchase_quotations', to='parties.supplier')),
            ],
            options={
                'db_table': 'purchase_quotations',
                'ordering': ['-created_at'],
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='PurchaseQuotationItem',
            fields=line_fields() + [
                ('quotation', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='items', to='purchasing.purchasequotation')),
            ],
            options={
                'db_table': 'purchase_quotation_items',
                'ordering': ['id'],
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='PurchaseOrder',
            fields=document_fields() + [
                ('contact_person', models.CharField(blank=True, max_length=200)),
                ('ref_number', models.CharField(blank=True, max_length=100)),
                ('status', models.CharField(choices=[('Open', 'Open'), ('Partially Received', 'Partially Received'), ('Closed', 'Closed'), ('Cancelled', 'Cancelled')], default='Open', max_length=20)),
                ('delivery_date', models.DateField(blank=True, null=True)),
                ('quotation', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='orders', to='purchasing.purchasequotation')),
                ('supplier', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='purchase_orders', to='parties.supplier')),
            ],
            options={
                'db_table': 'purchase_orders',
                'ordering': ['-created_at'],
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='PurchaseOrderItem',
            fields=line_fields() + [
                ('received_quantity', models.DecimalField(decimal_places=3, default=Decimal('0'), max_digits=14)),
                ('order', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='items', to='purchasing.purchaseorder')),
            ],
            options={
                'db_table': 'purchase_order_items',
                'ordering': ['id'],
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='GRN',
            fields=document_fields() + [
                ('contact_person', models.CharField(blank=True, max_length=200)),
                ('ref_number', models.CharField(blank=True, max_length=100)),
                ('status', models.CharField(default='Received', max_length=20)),
                ('purchase_order', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='grns', to='purchasing.purchaseorder')),
                ('supplier', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='grns', to='parties.supplier')),
            ],
            options={
                'verbose_name': 'GRN',
                'db_table': 'grns',
                'ordering': ['-created_at'],
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='GRNItem',
            fields=line_fields() + [
                ('bin_location', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to='locations.binlocation')),
                ('grn', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='items', to='purchasing.grn')),
                ('purchase_order_item', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='grn_lines', to='purchasing.purchaseorderitem')),
            ],
            options={
                'db_table': 'grn_items',
                'ordering': ['id'],
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='GRNItemBatch',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('batch_number', models.CharField(max_length=100)),
                ('quantity', models.DecimalField(decimal_places=3, max_digits=14)),
                ('expiry_date', models.DateField(blank=True, null=True)),
                ('manufacturer', models.CharField(blank=True, max_length=200)),
                ('grn_item', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='batches', to='purchasing.grnitem')),
            ],
            options={
                'db_table': 'grn_item_batches',
                'ordering': ['id'],
            },
        ),
        migrations.CreateModel(
            name='GRNQualityCheck',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('parameter', models.CharField(max_length=100)),
                ('min_value', models.DecimalField(blank=True, decimal_places=4, max_digits=14, null=True)),
                ('max_value', models.DecimalField(blank=True, decimal_places=4, max_digits=14, null=True)),
                ('actual_value', models.DecimalField(blank=True, decimal_places=4, max_digits=14, null=True)),
                ('grn_item', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='quality_checks', to='purchasing.grnitem')),
            ],
            options={
                'db_table': 'grn_quality_checks',
                'ordering': ['id'],
            },
        ),
        migrations.CreateModel(
            name='PurchaseAttachment',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('file', models.FileField(upload_to='purchasing/%Y/%m/')),
                ('file_name', models.CharField(max_length=255)),
                ('content_type', models.CharField(blank=True, max_length=100)),
                ('uploaded_at', models.DateTimeField(auto_now_add=True)),
                ('grn', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='attachments', to='purchasing.grn')),
                ('order', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='attachments', to='purchasing.purchaseorder')),
                ('quotation', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='attachments', to='purchasing.purchasequotation')),
                ('uploaded_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'purchase_attachments',
                'ordering': ['uploaded_at'],
            },
        ),
    ]
