from rest_framework import serializers

from .models import WorkspaceBrandSettings

HEX_COLOR_RE = r'^#([A-Fa-f0-9]{6}|[A-Fa-f0-9]{3})$'
FONT_CHOICES = ('Inter', 'Roboto', 'Open Sans', 'Lato', 'Montserrat', 'Poppins')
SIZE_CHOICES = ('none', 'sm', 'md', 'lg', 'xl')


class BrandColorsSerializer(serializers.Serializer):
    primary = serializers.RegexField(HEX_COLOR_RE)
    secondary = serializers.RegexField(HEX_COLOR_RE)
    background = serializers.RegexField(HEX_COLOR_RE)
    text = serializers.RegexField(HEX_COLOR_RE)


class BrandTypographySerializer(serializers.Serializer):
    font_family = serializers.ChoiceField(choices=FONT_CHOICES)
    heading_font = serializers.ChoiceField(choices=FONT_CHOICES)
    body_font = serializers.ChoiceField(choices=FONT_CHOICES)


class BrandComponentsSerializer(serializers.Serializer):
    card_radius = serializers.ChoiceField(choices=SIZE_CHOICES)
    shadow_size = serializers.ChoiceField(choices=SIZE_CHOICES)


class BrandSEOSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=100, allow_blank=True, required=False, default='')
    description = serializers.CharField(max_length=300, allow_blank=True, required=False, default='')
    og_image = serializers.URLField(allow_blank=True, required=False, default='')


class BrandSettingsSerializer(serializers.ModelSerializer):
    colors = BrandColorsSerializer()
    typography = BrandTypographySerializer()
    components = BrandComponentsSerializer()
    seo = BrandSEOSerializer(required=False)
    logo_url = serializers.URLField(max_length=800, allow_blank=True, required=False)

    class Meta:
        model = WorkspaceBrandSettings
        fields = ('workspace', 'logo_url', 'colors', 'typography', 'components', 'seo', 'created_at', 'updated_at')
        read_only_fields = ('workspace', 'created_at', 'updated_at')

    def create(self, validated_data):
        return WorkspaceBrandSettings.objects.create(**validated_data)

    def update(self, instance, validated_data):
        for field, value in validated_data.items():
            setattr(instance, field, value)
        instance.save()
        return instance
