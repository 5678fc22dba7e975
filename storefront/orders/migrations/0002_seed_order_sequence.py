from django.db import migrations


def seed_order_sequence(apps, schema_editor):
    OrderSequence = apps.get_model('orders', 'OrderSequence')
    Order = apps.get_model('orders', 'Order')
    if not OrderSequence.objects.filter(name='order').exists():
        OrderSequence.objects.create(name='order', value=Order.objects.count())


class Migration(migrations.Migration):

    dependencies = [
        ('orders', '0001_initial'),
    ]

    operations = [
        migrations.RunPython(seed_order_sequence, migrations.RunPython.noop),
    ]
