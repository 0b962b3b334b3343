from django.contrib.auth import get_user_model
from rest_framework import serializers

from .models import Workspace, WorkspaceMember


class UserBriefSerializer(serializers.ModelSerializer):
    class Meta:
        model = get_user_model()
        fields = ('id', 'username', 'email')


class WorkspaceMemberSerializer(serializers.ModelSerializer):
    user = UserBriefSerializer(read_only=True)
    user_id = serializers.IntegerField(write_only=True)
    role = serializers.ChoiceField(choices=[('admin', 'Admin'), ('member', 'Member')], required=False)

    class Meta:
        model = WorkspaceMember
        fields = ('id', 'user', 'user_id', 'role', 'created_at')
        read_only_fields = ('id', 'created_at')


class WorkspaceSerializer(serializers.ModelSerializer):
    owner = UserBriefSerializer(read_only=True)
    role = serializers.SerializerMethodField()

    class Meta:
        model = Workspace
        fields = ('id', 'name', 'owner', 'role', 'created_at')
        read_only_fields = ('id', 'owner', 'created_at')

    def get_role(self, obj: Workspace):
        request = self.context.get('request')
        user_id = getattr(getattr(request, 'user', None), 'id', None)
        if user_id is None:
            return None
        membership = obj.memberships.filter(user_id=user_id).first()
        return membership.role if membership else None
