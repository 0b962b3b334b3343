import uuid

from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('proposals', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='PublicLink',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('slug', models.SlugField(max_length=120, unique=True)),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                (
                    'created_by',
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=models.deletion.SET_NULL,
                        related_name='public_links',
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    'proposal',
                    models.OneToOneField(
                        on_delete=models.deletion.CASCADE,
                        related_name='public_link',
                        to='proposals.proposal',
                    ),
                ),
            ],
        ),
        migrations.CreateModel(
            name='ProposalSnapshot',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('brand', models.JSONField(blank=True, null=True)),
                ('blocks', models.JSONField(default=list)),
                ('meta', models.JSONField(default=dict)),
                ('sequence', models.PositiveIntegerField()),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                (
                    'proposal',
                    models.ForeignKey(
                        on_delete=models.deletion.CASCADE,
                        related_name='snapshots',
                        to='proposals.proposal',
                    ),
                ),
                (
                    'public_link',
                    models.ForeignKey(
                        on_delete=models.deletion.CASCADE,
                        related_name='snapshots',
                        to='publishing.publiclink',
                    ),
                ),
            ],
            options={
                'ordering': ['-sequence'],
                'constraints': [
                    models.UniqueConstraint(fields=('public_link', 'sequence'), name='snapshot_link_sequence_uniq'),
                ],
            },
        ),
    ]
