# Generated manually

import django.core.validators
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Attraction',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=200)),
                ('category', models.CharField(max_length=100)),
                ('location', models.CharField(max_length=200)),
                ('description', models.TextField(blank=True, default='')),
                ('wait_time', models.PositiveIntegerField(blank=True, help_text='Expected wait in minutes', null=True)),
                ('image_url', models.URLField(blank=True, max_length=500, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'attractions',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='Show',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('title', models.CharField(max_length=200)),
                ('description', models.TextField(blank=True, default='')),
                ('location', models.CharField(max_length=200)),
                ('start_time', models.DateTimeField()),
                ('end_time', models.DateTimeField()),
                ('status', models.CharField(choices=[('SCHEDULED', 'Scheduled'), ('ONGOING', 'Ongoing'), ('FINISHED', 'Finished'), ('CANCELLED', 'Cancelled'), ('DELAYED', 'Delayed')], default='SCHEDULED', max_length=20)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'shows',
                'ordering': ['start_time'],
            },
        ),
        migrations.CreateModel(
            name='Service',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=200)),
                ('location', models.CharField(max_length=200)),
                ('type', models.CharField(max_length=100)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'services',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='Discount',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=100)),
                ('percentage', models.DecimalField(decimal_places=2, max_digits=5, validators=[django.core.validators.MinValueValidator(0), django.core.validators.MaxValueValidator(100)])),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'db_table': 'discounts',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='TicketType',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=100, unique=True)),
                ('price', models.DecimalField(decimal_places=2, max_digits=10, validators=[django.core.validators.MinValueValidator(0)])),
                ('description', models.TextField(blank=True, default='')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'ticket_types',
                'ordering': ['price', 'name'],
            },
        ),
        migrations.CreateModel(
            name='TicketTypeAttraction',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('attraction', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='ticket_type_links', to='catalog.attraction')),
                ('ticket_type', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='attraction_links', to='catalog.tickettype')),
            ],
            options={
                'db_table': 'ticket_type_attractions',
            },
        ),
        migrations.CreateModel(
            name='TicketTypeShow',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('show', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='ticket_type_links', to='catalog.show')),
                ('ticket_type', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='show_links', to='catalog.tickettype')),
            ],
            options={
                'db_table': 'ticket_type_shows',
            },
        ),
        migrations.CreateModel(
            name='TicketTypeService',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('service', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='ticket_type_links', to='catalog.service')),
                ('ticket_type', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='service_links', to='catalog.tickettype')),
            ],
            options={
                'db_table': 'ticket_type_services',
            },
        ),
        migrations.AddField(
            model_name='tickettype',
            name='attractions',
            field=models.ManyToManyField(blank=True, related_name='ticket_types', through='catalog.TicketTypeAttraction', to='catalog.attraction'),
        ),
        migrations.AddField(
            model_name='tickettype',
            name='shows',
            field=models.ManyToManyField(blank=True, related_name='ticket_types', through='catalog.TicketTypeShow', to='catalog.show'),
        ),
        migrations.AddField(
            model_name='tickettype',
            name='services',
            field=models.ManyToManyField(blank=True, related_name='ticket_types', through='catalog.TicketTypeService', to='catalog.service'),
        ),
        migrations.AddConstraint(
            model_name='tickettypeattraction',
            constraint=models.UniqueConstraint(fields=('ticket_type', 'attraction'), name='uniq_ticket_type_attraction'),
        ),
        migrations.AddConstraint(
            model_name='tickettypeshow',
            constraint=models.UniqueConstraint(fields=('ticket_type', 'show'), name='uniq_ticket_type_show'),
        ),
        migrations.AddConstraint(
            model_name='tickettypeservice',
            constraint=models.UniqueConstraint(fields=('ticket_type', 'service'), name='uniq_ticket_type_service'),
        ),
    ]
