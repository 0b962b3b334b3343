from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ('workspaces', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='WorkspaceBrandSettings',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('logo_url', models.URLField(blank=True, default='', max_length=800)),
                ('colors', models.JSONField(default=dict)),
                ('typography', models.JSONField(default=dict)),
                ('components', models.JSONField(default=dict)),
                ('seo', models.JSONField(blank=True, default=dict)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                (
                    'workspace',
                    models.OneToOneField(
                        on_delete=models.deletion.CASCADE,
                        related_name='brand_settings',
                        to='workspaces.workspace',
                    ),
                ),
            ],
        ),
    ]
