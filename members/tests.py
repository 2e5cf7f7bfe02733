from django.contrib.auth import get_user_model
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from checkouts.models import Product
from domains.models import Domain, DomainUsage
from members.models import AccessGrant, Content, Lesson, MemberArea, Module, Track, TrackItem, TrackType


class MemberAreaAPITests(APITestCase):
    def setUp(self):
        self.user = get_user_model().objects.create_user(
            email="members@example.com",
            password="pass1234",
            username="members",
        )
        self.client.force_authenticate(user=self.user)

    def test_create_area_bound_to_own_domain(self):
        domain = Domain.objects.create(user=self.user, domain="membros.example.com", usage=DomainUsage.MEMBER_AREA)

        response = self.client.post(
            reverse("member-area-list"), {"name": "Área VIP", "domain": domain.id}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        area = MemberArea.objects.get()
        self.assertEqual(area.domain, domain)
        self.assertEqual(area.slug, "area-vip")

    def test_deleting_area_keeps_domain(self):
        domain = Domain.objects.create(user=self.user, domain="membros.example.com")
        area = MemberArea.objects.create(user=self.user, name="Área VIP", domain=domain)

        response = self.client.delete(reverse("member-area-detail", args=[area.id]))

        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertTrue(Domain.objects.filter(pk=domain.pk).exists())

    def test_grants_are_unique_per_area(self):
        area = MemberArea.objects.create(user=self.user, name="Área VIP")
        url = reverse("access-grant-list")

        first = self.client.post(url, {"member_area": area.id, "email": "Aluno@Example.com"}, format="json")
        second = self.client.post(url, {"member_area": area.id, "email": "aluno@example.com"}, format="json")

        self.assertEqual(first.status_code, status.HTTP_201_CREATED)
        self.assertEqual(second.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(AccessGrant.objects.count(), 1)

    def test_cannot_grant_on_foreign_area(self):
        other = get_user_model().objects.create_user(email="x@example.com", password="pass1234", username="x")
        area = MemberArea.objects.create(user=other, name="Alheia")

        response = self.client.post(
            reverse("access-grant-list"), {"member_area": area.id, "email": "a@example.com"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_checkout_domain_cannot_serve_member_area(self):
        domain = Domain.objects.create(user=self.user, domain="pay.example.com", usage=DomainUsage.CHECKOUT)

        response = self.client.post(
            reverse("member-area-list"), {"name": "Área VIP", "domain": domain.id}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("domain", response.data)
        self.assertFalse(MemberArea.objects.exists())


class MemberContentAPITests(APITestCase):
    def setUp(self):
        self.user = get_user_model().objects.create_user(
            email="creator@example.com",
            password="pass1234",
            username="creator",
        )
        self.other = get_user_model().objects.create_user(
            email="stranger@example.com",
            password="pass1234",
            username="stranger",
        )
        self.area = MemberArea.objects.create(user=self.user, name="Academia")
        self.product = Product.objects.create(user=self.user, name="Curso React")
        self.client.force_authenticate(user=self.user)

    def test_content_module_lesson_tree(self):
        content = self.client.post(
            reverse("content-list"),
            {"member_area": self.area.id, "title": "React do zero", "type": "course", "products": [self.product.id]},
            format="json",
        )
        self.assertEqual(content.status_code, status.HTTP_201_CREATED)
        self.assertEqual(content.data["products"], [self.product.id])

        module = self.client.post(
            reverse("module-list"), {"content": content.data["id"], "title": "Fundamentos"}, format="json"
        )
        self.assertEqual(module.status_code, status.HTTP_201_CREATED)

        lesson = self.client.post(
            reverse("lesson-list"),
            {
                "module": module.data["id"],
                "title": "JSX",
                "content_type": "video",
                "video_url": "https://video.example.com/jsx",
                "duration": 600,
            },
            format="json",
        )
        self.assertEqual(lesson.status_code, status.HTTP_201_CREATED)
        self.assertEqual(Lesson.objects.get().module.content.member_area, self.area)

        listing = self.client.get(reverse("module-list"), {"content": content.data["id"]})
        self.assertEqual([row["title"] for row in listing.data], ["Fundamentos"])

    def test_content_cannot_link_foreign_product(self):
        foreign = Product.objects.create(user=self.other, name="Alheio")

        response = self.client.post(
            reverse("content-list"),
            {"member_area": self.area.id, "title": "Pack", "type": "pack", "products": [foreign.id]},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("products", response.data)

    def test_module_under_foreign_content_is_rejected(self):
        foreign_area = MemberArea.objects.create(user=self.other, name="Alheia")
        foreign_content = Content.objects.create(member_area=foreign_area, title="Alheio")

        response = self.client.post(
            reverse("module-list"), {"content": foreign_content.id, "title": "Intruso"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(Module.objects.exists())

    def test_foreign_content_is_hidden(self):
        foreign_area = MemberArea.objects.create(user=self.other, name="Alheia")
        foreign_content = Content.objects.create(member_area=foreign_area, title="Alheio")
        Content.objects.create(member_area=self.area, title="Meu")

        listing = self.client.get(reverse("content-list"))
        detail = self.client.get(reverse("content-detail", args=[foreign_content.id]))

        self.assertEqual([row["title"] for row in listing.data], ["Meu"])
        self.assertEqual(detail.status_code, status.HTTP_404_NOT_FOUND)

    def test_track_items_must_match_track_type(self):
        content = Content.objects.create(member_area=self.area, title="React do zero")
        track = Track.objects.create(member_area=self.area, title="Cursos", type=TrackType.CONTENTS)
        url = reverse("track-item-list")

        accepted = self.client.post(url, {"track": track.id, "item_id": content.id, "position": 0}, format="json")
        unknown = self.client.post(url, {"track": track.id, "item_id": self.product.id + 1000}, format="json")

        self.assertEqual(accepted.status_code, status.HTTP_201_CREATED)
        self.assertEqual(unknown.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("item_id", unknown.data)
        self.assertEqual(TrackItem.objects.get().item_id, content.id)

    def test_product_track_rejects_foreign_product(self):
        foreign = Product.objects.create(user=self.other, name="Alheio")
        track = Track.objects.create(member_area=self.area, title="Ofertas", type=TrackType.PRODUCTS)

        response = self.client.post(
            reverse("track-item-list"), {"track": track.id, "item_id": foreign.id}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_track_type_is_locked_while_it_has_items(self):
        content = Content.objects.create(member_area=self.area, title="React do zero")
        track = Track.objects.create(member_area=self.area, title="Cursos", type=TrackType.CONTENTS)
        TrackItem.objects.create(track=track, item_id=content.id)

        response = self.client.patch(reverse("track-detail", args=[track.id]), {"type": "lessons"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        track.refresh_from_db()
        self.assertEqual(track.type, TrackType.CONTENTS)
