# enrollments/serializers.py
from rest_framework import serializers

from students.models import Student


class StudentSearchSerializer(serializers.ModelSerializer):
    name = serializers.CharField(source='user.name', read_only=True)
    email = serializers.EmailField(source='user.email', read_only=True)

    class Meta:
        model = Student
        fields = ['id', 'student_id', 'name', 'email', 'phone']
