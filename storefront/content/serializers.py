from rest_framework import serializers
from storefront.catalog.models import Product
from storefront.catalog.utils import absolute_media_url, clean_upload_path
from .models import Enquiry, HeroBanner, ENQUIRY_STATUS_CHOICES


class EnquirySerializer(serializers.ModelSerializer):
    productId = serializers.PrimaryKeyRelatedField(
        source='product', queryset=Product.objects.all(), required=False, allow_null=True
    )
    productName = serializers.CharField(source='product_name', required=False, allow_blank=True)
    selectedColor = serializers.CharField(source='selected_color', required=False, allow_blank=True)
    quantity = serializers.IntegerField(min_value=1, required=False)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)

    class Meta:
        model = Enquiry
        fields = [
            'id', 'name', 'email', 'phone', 'city', 'productId', 'productName',
            'selectedColor', 'quantity', 'message', 'status', 'createdAt'
        ]
        read_only_fields = ['status']

    def create(self, validated_data):
        product = validated_data.get('product')
        if product is not None and not validated_data.get('product_name'):
            validated_data['product_name'] = product.name
        return super().create(validated_data)


class EnquiryStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=ENQUIRY_STATUS_CHOICES)


class HeroBannerSerializer(serializers.ModelSerializer):
    buttonText = serializers.CharField(source='button_text', required=False)
    buttonLink = serializers.CharField(source='button_link', required=False)
    order = serializers.IntegerField(source='display_order', required=False)
    isActive = serializers.BooleanField(source='is_active', required=False)
    transitionEffect = serializers.ChoiceField(
        source='transition_effect', choices=HeroBanner._meta.get_field('transition_effect').choices, required=False
    )
    imageEffect = serializers.ChoiceField(
        source='image_effect', choices=HeroBanner._meta.get_field('image_effect').choices, required=False
    )
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = HeroBanner
        fields = [
            'id', 'title', 'subtitle', 'image', 'buttonText', 'buttonLink', 'order', 'isActive',
            'hotspots', 'transitionEffect', 'imageEffect', 'createdAt', 'updatedAt'
        ]

    def validate_image(self, value):
        return clean_upload_path(value)

    def validate_hotspots(self, value):
        if not isinstance(value, list):
            raise serializers.ValidationError('Hotspots must be a list.')
        for spot in value:
            if not isinstance(spot, dict) or spot.get('x') is None or spot.get('y') is None:
                raise serializers.ValidationError('Each hotspot needs x and y.')
        return value

    def to_representation(self, instance):
        data = super().to_representation(instance)
        data['image'] = absolute_media_url(instance.image, self.context.get('request'))
        return data
