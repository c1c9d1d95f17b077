from django.db import migrations, models


class Migration(migrations.Migration):
    dependencies = [
        ("production", "0001_initial"),
    ]

    operations = [
        migrations.AlterField(
            model_name="productiontallybucket",
            name="count",
            field=models.PositiveBigIntegerField(default=0),
        ),
    ]
