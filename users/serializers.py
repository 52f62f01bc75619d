from rest_framework import serializers
from .models import User


class UserSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = [
            'id',
            'username',
            'email',
            'role',
            'club_role',
            'avatar',
            'gems',
            'date_joined',
        ]
        read_only_fields = fields
