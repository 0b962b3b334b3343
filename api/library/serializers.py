from rest_framework import serializers

from workspaces.models import Workspace

from .models import Case, FAQItem

LINK_TYPES = ('website', 'github', 'app_store', 'google_play', 'demo', 'other')


class CaseLinkSerializer(serializers.Serializer):
    type = serializers.ChoiceField(choices=LINK_TYPES)
    url = serializers.URLField()
    title = serializers.CharField(max_length=100)


class CaseSerializer(serializers.ModelSerializer):
    workspace = serializers.PrimaryKeyRelatedField(queryset=Workspace.objects.all())
    technologies = serializers.ListField(child=serializers.CharField(max_length=100), required=False)
    images = serializers.ListField(child=serializers.URLField(), required=False)
    links = CaseLinkSerializer(many=True, required=False)
    description = serializers.CharField(max_length=5000, allow_blank=True, required=False)
    results = serializers.CharField(max_length=5000, allow_blank=True, required=False)

    class Meta:
        model = Case
        fields = (
            'id',
            'workspace',
            'title',
            'description',
            'technologies',
            'results',
            'images',
            'links',
            'created_at',
            'updated_at',
        )
        read_only_fields = ('id', 'created_at', 'updated_at')

    def create(self, validated_data):
        return Case.objects.create(**validated_data)

    def update(self, instance, validated_data):
        # workspace is fixed once created
        validated_data.pop('workspace', None)
        for field, value in validated_data.items():
            setattr(instance, field, value)
        instance.save()
        return instance


class FAQItemSerializer(serializers.ModelSerializer):
    workspace = serializers.PrimaryKeyRelatedField(queryset=Workspace.objects.all())
    category = serializers.CharField(max_length=100, allow_blank=True, required=False)

    class Meta:
        model = FAQItem
        fields = ('id', 'workspace', 'question', 'answer', 'category', 'order_index', 'created_at', 'updated_at')
        read_only_fields = ('id', 'created_at', 'updated_at')

    def update(self, instance, validated_data):
        validated_data.pop('workspace', None)
        return super().update(instance, validated_data)
