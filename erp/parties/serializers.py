from rest_framework import serializers
from .models import Customer, Supplier


class CustomerSerializer(serializers.ModelSerializer):
    company_name = serializers.CharField(source='company.name', read_only=True)
    assigned_agent_names = serializers.SerializerMethodField()

    class Meta:
        model = Customer
        fields = [
            'id', 'company', 'company_name', 'user', 'customer_code', 'name', 'email', 'phone', 'gstin',
            'address', 'assigned_agents', 'assigned_agent_names', 'last_assigned_agent_index',
            'is_active', 'created_at', 'updated_at'
        ]
        read_only_fields = ['last_assigned_agent_index', 'created_at', 'updated_at']

    def get_assigned_agent_names(self, obj):
        return [agent.get_full_name() or agent.username for agent in obj.assigned_agents.all()]


class SupplierSerializer(serializers.ModelSerializer):
    class Meta:
        model = Supplier
        fields = ['id', 'supplier_code', 'name', 'contact_person', 'phone', 'email', 'gstin', 'address',
                  'is_active', 'created_at', 'updated_at']
