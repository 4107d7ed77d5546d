# Generated manually

from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('catalog', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Ticket',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('raw_code', models.CharField(help_text='Code encoded in the QR and checked at the gate', max_length=100, unique=True)),
                ('qr_code', models.TextField(help_text='PNG data URL of the validation QR code')),
                ('valid_for', models.DateField(help_text='Calendar day (UTC) the ticket is valid for')),
                ('status', models.CharField(choices=[('ACTIVE', 'Active'), ('USED', 'Used'), ('EXPIRED', 'Expired')], db_index=True, default='ACTIVE', max_length=10)),
                ('payment_method', models.CharField(blank=True, choices=[('CREDIT_CARD', 'Credit card'), ('PAYPAL', 'PayPal'), ('BANK_TRANSFER', 'Bank transfer')], max_length=20, null=True)),
                ('redeemed_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('discount', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='tickets', to='catalog.discount')),
                ('redeemed_by', models.ForeignKey(blank=True, help_text='Staff member who validated the ticket', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='redeemed_tickets', to=settings.AUTH_USER_MODEL)),
                ('ticket_type', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='tickets', to='catalog.tickettype')),
                ('user', models.ForeignKey(help_text='Ticket owner', on_delete=django.db.models.deletion.CASCADE, related_name='tickets', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Ticket',
                'verbose_name_plural': 'Tickets',
                'db_table': 'tickets',
                'ordering': ['-created_at'],
            },
        ),
        migrations.AddIndex(
            model_name='ticket',
            index=models.Index(fields=['user', 'status'], name='tickets_user_status_idx'),
        ),
        migrations.AddIndex(
            model_name='ticket',
            index=models.Index(fields=['status', 'valid_for'], name='tickets_status_valid_idx'),
        ),
    ]
