from rest_framework import serializers

from checkouts.models import Product
from checkouts.serializers import OwnedRelatedField
from domains.models import Domain, DomainUsage

from .models import AccessGrant, Content, Lesson, MemberArea, Module, Track, TrackItem, TrackType


class MemberAreaSerializer(serializers.ModelSerializer):
    domain = OwnedRelatedField(queryset=Domain.objects.all(), required=False, allow_null=True)
    grants_count = serializers.IntegerField(source="grants.count", read_only=True)

    class Meta:
        model = MemberArea
        fields = ["id", "name", "slug", "domain", "grants_count", "created_at"]
        read_only_fields = ("id", "created_at")

    def validate_domain(self, domain):
        if domain is not None and domain.usage != DomainUsage.MEMBER_AREA:
            raise serializers.ValidationError("Only member area domains can be bound to a member area.")
        return domain


class AccessGrantSerializer(serializers.ModelSerializer):
    member_area = OwnedRelatedField(queryset=MemberArea.objects.all())
    product = OwnedRelatedField(queryset=Product.objects.all(), required=False, allow_null=True)

    class Meta:
        model = AccessGrant
        fields = ["id", "member_area", "email", "product", "created_at"]
        read_only_fields = ("id", "created_at")

    def validate_email(self, value):
        return value.strip().lower()


class ContentSerializer(serializers.ModelSerializer):
    member_area = OwnedRelatedField(queryset=MemberArea.objects.all())
    products = OwnedRelatedField(queryset=Product.objects.all(), many=True, required=False)
    modules_count = serializers.IntegerField(source="modules.count", read_only=True)

    class Meta:
        model = Content
        fields = [
            "id",
            "member_area",
            "title",
            "description",
            "thumbnail_url",
            "type",
            "is_free",
            "products",
            "modules_count",
            "created_at",
        ]
        read_only_fields = ("id", "created_at")


class ModuleSerializer(serializers.ModelSerializer):
    content = OwnedRelatedField(queryset=Content.objects.all(), owner_field="member_area__user")

    class Meta:
        model = Module
        fields = ["id", "content", "title", "description", "order_index", "is_free", "created_at"]
        read_only_fields = ("id", "created_at")


class LessonSerializer(serializers.ModelSerializer):
    module = OwnedRelatedField(queryset=Module.objects.all(), owner_field="content__member_area__user")

    class Meta:
        model = Lesson
        fields = [
            "id",
            "module",
            "title",
            "content_type",
            "video_url",
            "content_text",
            "file_url",
            "order_index",
            "duration",
            "is_free",
            "created_at",
        ]
        read_only_fields = ("id", "created_at")


class TrackSerializer(serializers.ModelSerializer):
    member_area = OwnedRelatedField(queryset=MemberArea.objects.all())

    class Meta:
        model = Track
        fields = ["id", "member_area", "title", "type", "position", "is_visible", "card_style", "created_at"]
        read_only_fields = ("id", "created_at")

    def validate_type(self, value):
        if self.instance is not None and value != self.instance.type and self.instance.items.exists():
            raise serializers.ValidationError("Remove the track items before changing the track type.")
        return value


# Track type -> (model, owner lookup) used to resolve TrackItem.item_id
TRACK_ITEM_SOURCES = {
    TrackType.PRODUCTS: (Product, "user"),
    TrackType.CONTENTS: (Content, "member_area__user"),
    TrackType.MODULES: (Module, "content__member_area__user"),
    TrackType.LESSONS: (Lesson, "module__content__member_area__user"),
}


class TrackItemSerializer(serializers.ModelSerializer):
    track = OwnedRelatedField(queryset=Track.objects.all(), owner_field="member_area__user")

    class Meta:
        model = TrackItem
        fields = ["id", "track", "item_id", "position"]
        read_only_fields = ("id",)

    def validate(self, attrs):
        track = attrs.get("track") or self.instance.track
        item_id = attrs.get("item_id", getattr(self.instance, "item_id", None))
        model, owner_field = TRACK_ITEM_SOURCES[track.type]
        request = self.context["request"]
        if not model.objects.filter(pk=item_id, **{owner_field: request.user}).exists():
            raise serializers.ValidationError(
                {"item_id": f"No {model._meta.verbose_name} with id {item_id} for this {track.type} track."}
            )
        return attrs
