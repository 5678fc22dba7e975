# Generated manually
import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('catalog', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='HeroBanner',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('title', models.CharField(blank=True, default='', max_length=255)),
                ('subtitle', models.CharField(blank=True, default='', max_length=500)),
                ('image', models.CharField(max_length=500)),
                ('button_text', models.CharField(default='Browse Products', max_length=100)),
                ('button_link', models.CharField(default='/products', max_length=255)),
                ('display_order', models.IntegerField(default=0)),
                ('is_active', models.BooleanField(default=True)),
                ('hotspots', models.JSONField(blank=True, default=list)),
                ('transition_effect', models.CharField(
                    choices=[('fade', 'Fade'), ('slide-left', 'Slide left'), ('slide-right', 'Slide right'), ('zoom-in', 'Zoom in')],
                    default='fade', max_length=20)),
                ('image_effect', models.CharField(
                    choices=[('none', 'None'), ('zoom-in', 'Zoom in'), ('zoom-out', 'Zoom out'), ('subtle-pan', 'Subtle pan')],
                    default='none', max_length=20)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'hero_banners',
                'ordering': ['display_order', 'id'],
            },
        ),
        migrations.CreateModel(
            name='Enquiry',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255)),
                ('email', models.EmailField(blank=True, max_length=254)),
                ('phone', models.CharField(max_length=20)),
                ('city', models.CharField(blank=True, max_length=100)),
                ('product_name', models.CharField(blank=True, max_length=255)),
                ('selected_color', models.CharField(blank=True, max_length=100)),
                ('quantity', models.PositiveIntegerField(default=1)),
                ('message', models.TextField(blank=True)),
                ('status', models.CharField(
                    choices=[('new', 'New'), ('contacted', 'Contacted'), ('closed', 'Closed')],
                    default='new', max_length=20)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('product', models.ForeignKey(
                    blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL,
                    related_name='enquiries', to='catalog.product')),
            ],
            options={
                'db_table': 'enquiries',
                'ordering': ['-created_at', '-id'],
                'verbose_name_plural': 'enquiries',
            },
        ),
    ]
