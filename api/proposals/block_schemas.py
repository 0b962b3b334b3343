"""Props schemas for each block family.

Each schema is a plain DRF serializer; ``block_types`` binds one to every
``BlockType``. Keys are snake_case. Unknown keys are dropped on validation and
defaults are filled in, so ``validated_data`` is the normalised props document.
"""

from django.conf import settings
from rest_framework import serializers


class StrictCharField(serializers.CharField):
    """CharField that accepts only JSON strings and keeps the text as typed."""

    default_error_messages = {'not_a_string': 'Not a valid string.'}

    def __init__(self, **kwargs):
        kwargs.setdefault('trim_whitespace', False)
        super().__init__(**kwargs)

    def to_internal_value(self, data):
        if not isinstance(data, str):
            self.fail('not_a_string')
        return super().to_internal_value(data)


def _optional_text(max_length):
    return StrictCharField(required=False, allow_blank=True, max_length=max_length)


class HeroPropsSerializer(serializers.Serializer):
    title = StrictCharField(min_length=1, max_length=200)
    subtitle = _optional_text(500)
    cta_label = _optional_text(50)
    client_name = _optional_text(100)


class CasesPropsSerializer(serializers.Serializer):
    layout = serializers.ChoiceField(choices=['slider', 'grid', 'row'])
    case_ids = serializers.ListField(child=serializers.UUIDField())
    show_tags = serializers.BooleanField(required=False, default=True)
    show_links = serializers.BooleanField(required=False, default=True)


class TimelineItemSerializer(serializers.Serializer):
    title = StrictCharField(min_length=1, max_length=200)
    date = _optional_text(100)
    description = _optional_text(1000)


class TimelinePropsSerializer(serializers.Serializer):
    variant = serializers.ChoiceField(choices=['linear', 'vertical', 'phases'])
    items = TimelineItemSerializer(many=True, allow_empty=False)


class TeamMemberSerializer(serializers.Serializer):
    role = StrictCharField(min_length=1, max_length=100)
    qty = serializers.IntegerField(min_value=1)
    rate = serializers.FloatField(min_value=0)


class TeamEstimatePropsSerializer(serializers.Serializer):
    members = TeamMemberSerializer(many=True, allow_empty=False)
    currency = StrictCharField(required=False, max_length=10, default='RUB')
    show_total = serializers.BooleanField(required=False, default=True)


class PaymentItemSerializer(serializers.Serializer):
    label = StrictCharField(min_length=1, max_length=200)
    date = _optional_text(100)
    amount = serializers.FloatField(min_value=0)


class PaymentSchedulePropsSerializer(serializers.Serializer):
    items = PaymentItemSerializer(many=True, allow_empty=False)
    currency = StrictCharField(required=False, max_length=10, default='RUB')


class FAQPropsSerializer(serializers.Serializer):
    faq_item_ids = serializers.ListField(child=serializers.UUIDField())
    layout = serializers.ChoiceField(choices=['accordion', 'list'])


class ContactItemSerializer(serializers.Serializer):
    label = _optional_text(100)
    name = _optional_text(100)
    email = serializers.EmailField(required=False, allow_blank=True)
    phone = _optional_text(50)
    link_label = _optional_text(100)
    link_url = serializers.URLField(required=False, allow_blank=True)


class ContactsPropsSerializer(serializers.Serializer):
    contacts = ContactItemSerializer(many=True, allow_empty=False)


class FooterPropsSerializer(ContactsPropsSerializer):
    layout = serializers.ChoiceField(choices=['simple', 'columns'], required=False)
    copyright_text = _optional_text(200)


class RichTextNodeSerializer(serializers.Serializer):
    """Editor document node; children are kept as opaque JSON."""

    type = StrictCharField()
    content = serializers.ListField(required=False)
    text = StrictCharField(required=False, allow_blank=True)
    marks = serializers.ListField(required=False)
    attrs = serializers.DictField(required=False)


class TextPropsSerializer(serializers.Serializer):
    content = RichTextNodeSerializer()
    align = serializers.ChoiceField(choices=['left', 'center', 'right'], required=False, default='left')


class GalleryPropsSerializer(serializers.Serializer):
    image_urls = serializers.ListField(child=serializers.URLField())

    def validate_image_urls(self, value):
        limit = getattr(settings, 'GALLERY_MAX_IMAGES', 12)
        if len(value) > limit:
            raise serializers.ValidationError(f'Gallery can contain at most {limit} images.')
        return value


class StyleOverridesSerializer(serializers.Serializer):
    style_overrides = serializers.DictField(child=StrictCharField(allow_blank=True))
