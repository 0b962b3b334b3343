import uuid

from django.conf import settings
from django.db import migrations, models


BLOCK_TYPE_CHOICES = [
    ('hero_simple', 'Hero Section'),
    ('cases_grid', 'Cases Grid'),
    ('cases_slider', 'Cases Slider'),
    ('cases_row', 'Cases Row'),
    ('timeline_linear', 'Linear Timeline'),
    ('timeline_vertical', 'Vertical Timeline'),
    ('timeline_phases', 'Timeline Phases'),
    ('team_estimate', 'Team Estimate'),
    ('payment_schedule', 'Payment Schedule'),
    ('faq_accordion', 'FAQ Accordion'),
    ('faq_list', 'FAQ List'),
    ('contacts_cards', 'Contact Cards'),
    ('contacts_footer', 'Footer'),
    ('text', 'Text Block'),
    ('gallery', 'Image Gallery'),
]


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('workspaces', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Proposal',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('title', models.CharField(max_length=200)),
                ('client_name', models.CharField(blank=True, default='', max_length=200)),
                (
                    'status',
                    models.CharField(
                        choices=[('draft', 'Draft'), ('sent', 'Sent'), ('accepted', 'Accepted'), ('rejected', 'Rejected')],
                        default='draft',
                        max_length=16,
                    ),
                ),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                (
                    'created_by',
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=models.deletion.SET_NULL,
                        related_name='proposals',
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    'workspace',
                    models.ForeignKey(
                        on_delete=models.deletion.CASCADE,
                        related_name='proposals',
                        to='workspaces.workspace',
                    ),
                ),
            ],
        ),
        migrations.CreateModel(
            name='ProposalBlock',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('type', models.CharField(choices=BLOCK_TYPE_CHOICES, max_length=32)),
                ('order_index', models.PositiveIntegerField(default=0)),
                ('props', models.JSONField(default=dict)),
                ('style_overrides', models.JSONField(blank=True, default=dict)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                (
                    'proposal',
                    models.ForeignKey(
                        on_delete=models.deletion.CASCADE,
                        related_name='blocks',
                        to='proposals.proposal',
                    ),
                ),
            ],
            options={
                'ordering': ['proposal_id', 'order_index', 'created_at'],
                'indexes': [models.Index(fields=['proposal', 'order_index'], name='proposal_block_order_idx')],
            },
        ),
    ]
