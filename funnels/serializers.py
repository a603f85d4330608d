# funnels/serializers.py
from rest_framework import serializers


class ChartPointSerializer(serializers.Serializer):
    date = serializers.DateField()
    visitors = serializers.IntegerField()
    conversions = serializers.IntegerField()
    revenue = serializers.FloatField()
