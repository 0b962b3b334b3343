"""Closed registry of block types.

Every ``BlockType`` member has exactly one ``BlockDefinition`` carrying its
picker metadata, default props, props schema and the foreign references it
embeds. The module refuses to import if a member is missing or registered
twice, so adding a type without registering it fails at startup.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Optional

from django.core.exceptions import ImproperlyConfigured
from django.db import models

from app.common.checksum import to_json_safe
from app.common.keys import t
from app.errors import ValidationFailed, flatten_field_errors

from . import block_schemas as schemas


class BlockType(models.TextChoices):
    HERO_SIMPLE = 'hero_simple', 'Hero Section'
    CASES_GRID = 'cases_grid', 'Cases Grid'
    CASES_SLIDER = 'cases_slider', 'Cases Slider'
    CASES_ROW = 'cases_row', 'Cases Row'
    TIMELINE_LINEAR = 'timeline_linear', 'Linear Timeline'
    TIMELINE_VERTICAL = 'timeline_vertical', 'Vertical Timeline'
    TIMELINE_PHASES = 'timeline_phases', 'Timeline Phases'
    TEAM_ESTIMATE = 'team_estimate', 'Team Estimate'
    PAYMENT_SCHEDULE = 'payment_schedule', 'Payment Schedule'
    FAQ_ACCORDION = 'faq_accordion', 'FAQ Accordion'
    FAQ_LIST = 'faq_list', 'FAQ List'
    CONTACTS_CARDS = 'contacts_cards', 'Contact Cards'
    CONTACTS_FOOTER = 'contacts_footer', 'Footer'
    TEXT = 'text', 'Text Block'
    GALLERY = 'gallery', 'Image Gallery'


class BlockCategory(models.TextChoices):
    INTRO = 'intro', 'Intro'
    CASES = 'cases', 'Cases'
    TIMELINE = 'timeline', 'Timeline'
    ESTIMATE = 'estimate', 'Estimate & payment'
    FAQ = 'faq', 'FAQ'
    FOOTER = 'footer', 'Footer'
    CONTENT = 'content', 'Content'


@dataclass(frozen=True)
class Reference:
    """A list of foreign ids inside props that is inlined at publish time."""

    ids_key: str  # props key holding the id list
    target_key: str  # props key receiving the resolved records
    collection: str  # 'cases' | 'faq_items'


CASE_REFERENCES = (Reference('case_ids', 'cases', 'cases'),)
FAQ_REFERENCES = (Reference('faq_item_ids', 'faq_items', 'faq_items'),)


@dataclass(frozen=True)
class BlockDefinition:
    type: BlockType
    category: BlockCategory
    label: str
    description: str
    icon: str
    default_props: dict[str, Any]
    schema: type
    references: tuple[Reference, ...] = field(default=())

    def as_picker_entry(self) -> dict[str, Any]:
        return {
            'type': self.type.value,
            'category': self.category.value,
            'label': self.label,
            'description': self.description,
            'icon': self.icon,
            'default_props': copy.deepcopy(self.default_props),
        }


def _timeline_defaults(variant: str, title: str) -> dict[str, Any]:
    return {'variant': variant, 'items': [{'title': title, 'date': '', 'description': 'Describe this stage'}]}


def _cases_defaults(layout: str, show_links: bool = True) -> dict[str, Any]:
    return {'layout': layout, 'case_ids': [], 'show_tags': True, 'show_links': show_links}


BLOCK_DEFINITIONS: tuple[BlockDefinition, ...] = (
    BlockDefinition(
        BlockType.HERO_SIMPLE,
        BlockCategory.INTRO,
        'Hero Section',
        'Headline with subtitle and a call-to-action button',
        'target',
        {
            'title': 'Welcome',
            'subtitle': 'We build outstanding solutions for your business',
            'cta_label': 'Get started',
            'client_name': '',
        },
        schemas.HeroPropsSerializer,
    ),
    BlockDefinition(
        BlockType.CASES_GRID,
        BlockCategory.CASES,
        'Cases Grid',
        'Grid of case study cards',
        'grid',
        _cases_defaults('grid'),
        schemas.CasesPropsSerializer,
        CASE_REFERENCES,
    ),
    BlockDefinition(
        BlockType.CASES_SLIDER,
        BlockCategory.CASES,
        'Cases Slider',
        'Case studies in a carousel',
        'slider',
        _cases_defaults('slider'),
        schemas.CasesPropsSerializer,
        CASE_REFERENCES,
    ),
    BlockDefinition(
        BlockType.CASES_ROW,
        BlockCategory.CASES,
        'Cases Row',
        'Horizontal row of case studies',
        'row',
        _cases_defaults('row', show_links=False),
        schemas.CasesPropsSerializer,
        CASE_REFERENCES,
    ),
    BlockDefinition(
        BlockType.TIMELINE_LINEAR,
        BlockCategory.TIMELINE,
        'Linear Timeline',
        'Project stages on a horizontal line',
        'calendar',
        _timeline_defaults('linear', 'Stage 1'),
        schemas.TimelinePropsSerializer,
    ),
    BlockDefinition(
        BlockType.TIMELINE_VERTICAL,
        BlockCategory.TIMELINE,
        'Vertical Timeline',
        'Project stages stacked vertically',
        'arrow-down',
        _timeline_defaults('vertical', 'Stage 1'),
        schemas.TimelinePropsSerializer,
    ),
    BlockDefinition(
        BlockType.TIMELINE_PHASES,
        BlockCategory.TIMELINE,
        'Timeline Phases',
        'Project broken into phases',
        'refresh',
        _timeline_defaults('phases', 'Phase 1'),
        schemas.TimelinePropsSerializer,
    ),
    BlockDefinition(
        BlockType.TEAM_ESTIMATE,
        BlockCategory.ESTIMATE,
        'Team Estimate',
        'Team composition with cost calculation',
        'users',
        {'members': [{'role': 'Frontend Developer', 'qty': 1, 'rate': 5000}], 'currency': 'RUB', 'show_total': True},
        schemas.TeamEstimatePropsSerializer,
    ),
    BlockDefinition(
        BlockType.PAYMENT_SCHEDULE,
        BlockCategory.ESTIMATE,
        'Payment Schedule',
        'Payment milestones',
        'wallet',
        {'items': [{'label': 'First payment', 'date': '', 'amount': 0}], 'currency': 'RUB'},
        schemas.PaymentSchedulePropsSerializer,
    ),
    BlockDefinition(
        BlockType.FAQ_ACCORDION,
        BlockCategory.FAQ,
        'FAQ Accordion',
        'Questions that expand on click',
        'help',
        {'faq_item_ids': [], 'layout': 'accordion'},
        schemas.FAQPropsSerializer,
        FAQ_REFERENCES,
    ),
    BlockDefinition(
        BlockType.FAQ_LIST,
        BlockCategory.FAQ,
        'FAQ List',
        'Questions and answers as a plain list',
        'list',
        {'faq_item_ids': [], 'layout': 'list'},
        schemas.FAQPropsSerializer,
        FAQ_REFERENCES,
    ),
    BlockDefinition(
        BlockType.CONTACTS_CARDS,
        BlockCategory.FOOTER,
        'Contact Cards',
        'Contact people as cards',
        'id-card',
        {'contacts': [{'name': '', 'email': '', 'phone': ''}]},
        schemas.ContactsPropsSerializer,
    ),
    BlockDefinition(
        BlockType.CONTACTS_FOOTER,
        BlockCategory.FOOTER,
        'Footer',
        'Footer with contacts and links',
        'phone',
        {'contacts': [{'email': '', 'phone': ''}], 'layout': 'simple', 'copyright_text': ''},
        schemas.FooterPropsSerializer,
    ),
    BlockDefinition(
        BlockType.TEXT,
        BlockCategory.CONTENT,
        'Text Block',
        'Formatted rich text',
        'text',
        {
            'content': {
                'type': 'doc',
                'content': [{'type': 'paragraph', 'content': [{'type': 'text', 'text': 'Start typing...'}]}],
            },
            'align': 'left',
        },
        schemas.TextPropsSerializer,
    ),
    BlockDefinition(
        BlockType.GALLERY,
        BlockCategory.CONTENT,
        'Image Gallery',
        'Grid of images',
        'image',
        {'image_urls': []},
        schemas.GalleryPropsSerializer,
    ),
)


def _index(definitions) -> dict[str, BlockDefinition]:
    index: dict[str, BlockDefinition] = {}
    for definition in definitions:
        key = definition.type.value
        if key in index:
            raise ImproperlyConfigured(f'Block type {key!r} is registered more than once')
        index[key] = definition
    missing = sorted(set(BlockType.values) - set(index))
    if missing:
        raise ImproperlyConfigured(f'Block types without a definition: {", ".join(missing)}')
    return index


_REGISTRY = _index(BLOCK_DEFINITIONS)


def is_valid_block_type(value: Any) -> bool:
    return isinstance(value, str) and value in _REGISTRY


def get_definition(block_type: Any) -> BlockDefinition:
    """Definition for ``block_type``; unknown types are a validation error."""
    if not is_valid_block_type(block_type):
        raise ValidationFailed(
            t('errors.block.unknown_type', type=block_type),
            field_errors={'type': [t('errors.block.unknown_type', type=block_type)]},
        )
    return _REGISTRY[block_type]


def get_default_props(block_type: Any) -> dict[str, Any]:
    return copy.deepcopy(get_definition(block_type).default_props)


def all_categories() -> list[str]:
    return list(BlockCategory.values)


def category_label(category: str) -> Optional[str]:
    try:
        return BlockCategory(category).label
    except ValueError:
        return None


def blocks_by_category(category: str) -> list[BlockDefinition]:
    return [d for d in BLOCK_DEFINITIONS if d.category.value == category]


def picker_catalogue() -> list[dict[str, Any]]:
    """Categories in declared order with their block entries, for the add-block picker."""
    return [
        {
            'category': category,
            'label': category_label(category),
            'blocks': [d.as_picker_entry() for d in blocks_by_category(category)],
        }
        for category in all_categories()
    ]


def validate_block_props(block_type: Any, props: Any) -> dict[str, Any]:
    """Validate ``props`` against the schema of ``block_type``.

    Returns the normalised, JSON-safe props. Raises ``ValidationFailed`` with
    dotted field errors otherwise.
    """
    definition = get_definition(block_type)
    if not isinstance(props, dict):
        raise ValidationFailed(t('errors.block.invalid_props'), field_errors={'props': [t('errors.block.props_not_object')]})
    serializer = definition.schema(data=props)
    if not serializer.is_valid():
        raise ValidationFailed(t('errors.block.invalid_props'), field_errors=flatten_field_errors(serializer.errors, 'props'))
    return to_json_safe(serializer.validated_data)


def validate_style_overrides(style_overrides: Any) -> dict[str, str]:
    serializer = schemas.StyleOverridesSerializer(data={'style_overrides': style_overrides})
    if not serializer.is_valid():
        raise ValidationFailed(t('errors.block.invalid_style'), field_errors=flatten_field_errors(serializer.errors))
    return dict(serializer.validated_data['style_overrides'])
