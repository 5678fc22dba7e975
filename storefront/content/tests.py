"""
Tests for product enquiries and home page hero banners
"""
from django.test import TestCase
from rest_framework import status
from storefront.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from storefront.content.models import Enquiry, HeroBanner


class EnquiryCreateTests(TestCase):
    """Public enquiry form"""

    def setUp(self):
        self.client = AuthenticatedAPIClient()

    def test_anonymous_visitor_can_enquire(self):
        product = TestDataFactory.create_product(name='Teak Sofa')
        response = self.client.post('/api/enquiries', {
            'name': 'Kiran Desai',
            'phone': '9898989898',
            'city': 'Surat',
            'productId': product.id,
            'selectedColor': 'Walnut',
            'quantity': 2,
            'message': 'Do you deliver on weekends?',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], 'new')
        self.assertEqual(response.data['productName'], 'Teak Sofa')
        enquiry = Enquiry.objects.get()
        self.assertEqual(enquiry.product, product)
        self.assertEqual(enquiry.quantity, 2)

    def test_general_enquiry_without_product(self):
        response = self.client.post('/api/enquiries', {'name': 'Kiran', 'phone': '9898989898'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertIsNone(response.data['productId'])
        self.assertEqual(response.data['quantity'], 1)

    def test_phone_is_required(self):
        response = self.client.post('/api/enquiries', {'name': 'Kiran'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('phone', response.data)

    def test_client_cannot_set_status(self):
        response = self.client.post('/api/enquiries', {
            'name': 'Kiran', 'phone': '9898989898', 'status': 'closed'
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(Enquiry.objects.get().status, 'new')


class EnquiryAdminTests(TestCase):

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(TestDataFactory.create_admin())

    def test_list_newest_first(self):
        first = TestDataFactory.create_enquiry(name='First')
        second = TestDataFactory.create_enquiry(name='Second')
        response = self.client.get('/api/enquiries')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([e['id'] for e in response.data], [second.id, first.id])

    def test_list_filters_by_status(self):
        TestDataFactory.create_enquiry(status='new')
        closed = TestDataFactory.create_enquiry(status='closed')
        response = self.client.get('/api/enquiries', {'status': 'closed'})
        self.assertEqual([e['id'] for e in response.data], [closed.id])

    def test_list_forbidden_for_customers(self):
        self.client.authenticate_user(TestDataFactory.create_user())
        self.assertEqual(self.client.get('/api/enquiries').status_code, status.HTTP_403_FORBIDDEN)

    def test_list_requires_authentication(self):
        self.client.logout()
        self.assertEqual(self.client.get('/api/enquiries').status_code, status.HTTP_401_UNAUTHORIZED)

    def test_update_status(self):
        enquiry = TestDataFactory.create_enquiry()
        response = self.client.put(f'/api/enquiries/{enquiry.id}', {'status': 'contacted'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'contacted')
        enquiry.refresh_from_db()
        self.assertEqual(enquiry.status, 'contacted')

    def test_update_unknown_status(self):
        enquiry = TestDataFactory.create_enquiry()
        response = self.client.put(f'/api/enquiries/{enquiry.id}', {'status': 'archived'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        enquiry.refresh_from_db()
        self.assertEqual(enquiry.status, 'new')

    def test_update_missing_enquiry(self):
        response = self.client.put('/api/enquiries/9999', {'status': 'closed'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['message'], 'Enquiry not found')

    def test_dashboard_counts_enquiries(self):
        TestDataFactory.create_enquiry(name='Older')
        latest = TestDataFactory.create_enquiry(name='Latest')
        response = self.client.get('/api/dashboard/stats')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['stats']['enquiries'], 2)
        self.assertEqual(response.data['recentActivity'][0]['id'], latest.id)


class HeroBannerPublicTests(TestCase):

    def setUp(self):
        self.client = AuthenticatedAPIClient()

    def test_only_active_banners_in_order(self):
        second = TestDataFactory.create_banner(title='Second', display_order=2)
        first = TestDataFactory.create_banner(title='First', display_order=1)
        TestDataFactory.create_banner(title='Hidden', display_order=0, is_active=False)
        response = self.client.get('/api/hero-banners')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([b['id'] for b in response.data], [first.id, second.id])

    def test_image_is_absolute(self):
        TestDataFactory.create_banner(image='/uploads/banners/living.jpg')
        response = self.client.get('/api/hero-banners')
        self.assertEqual(response.data[0]['image'], 'http://testserver/uploads/banners/living.jpg')
        self.assertEqual(response.data[0]['buttonText'], 'Browse Products')

    def test_create_requires_admin(self):
        response = self.client.post('/api/hero-banners', {'image': '/uploads/a.jpg'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.client.authenticate_user(TestDataFactory.create_editor())
        response = self.client.post('/api/hero-banners', {'image': '/uploads/a.jpg'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class HeroBannerAdminTests(TestCase):

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(TestDataFactory.create_admin())

    def test_admin_list_includes_inactive(self):
        TestDataFactory.create_banner(is_active=False)
        TestDataFactory.create_banner()
        response = self.client.get('/api/hero-banners/admin')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 2)

    def test_create(self):
        response = self.client.post('/api/hero-banners', {
            'title': 'Monsoon Sale',
            'image': 'http://cdn.example.com/uploads/banners/monsoon.jpg',
            'order': 3,
            'hotspots': [{'x': 40, 'y': 55, 'label': 'Recliner'}],
            'transitionEffect': 'slide-left',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(response.data['success'])
        banner = HeroBanner.objects.get()
        self.assertEqual(banner.image, '/uploads/banners/monsoon.jpg')
        self.assertEqual(banner.display_order, 3)
        self.assertEqual(banner.transition_effect, 'slide-left')

    def test_create_rejects_hotspot_without_coordinates(self):
        response = self.client.post('/api/hero-banners', {
            'image': '/uploads/banners/a.jpg',
            'hotspots': [{'label': 'Nowhere'}],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_update_and_delete(self):
        banner = TestDataFactory.create_banner()
        response = self.client.put(f'/api/hero-banners/{banner.id}', {'isActive': False}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(response.data['banner']['isActive'])
        response = self.client.delete(f'/api/hero-banners/{banner.id}')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(HeroBanner.objects.exists())

    def test_missing_banner(self):
        response = self.client.delete('/api/hero-banners/9999')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['message'], 'Hero banner not found')
