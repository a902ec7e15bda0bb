import access_control.models
from django.db import migrations, models


class Migration(migrations.Migration):
    dependencies = [
        ("access_control", "0002_customgrant"),
    ]

    operations = [
        migrations.AlterField(
            model_name="rolepermission",
            name="actions",
            field=models.JSONField(default=list, validators=[access_control.models.validate_action_list]),
        ),
        migrations.AlterField(
            model_name="customgrant",
            name="actions",
            field=models.JSONField(default=list, validators=[access_control.models.validate_action_list]),
        ),
    ]
