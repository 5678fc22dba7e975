"""
Tests for pincode serviceability and serviceable-area administration
"""
from django.test import TestCase
from rest_framework import status
from storefront.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from storefront.delivery.lookup import fallback_lookup
from storefront.delivery.models import ServiceableArea


class FallbackLookupTests(TestCase):

    def test_gujarat_prefixes(self):
        for pincode in ('360001', '370001', '380015', '390001'):
            self.assertEqual(fallback_lookup(pincode), {'city': 'Gujarat Area', 'state': 'Gujarat'})

    def test_three_digit_prefix_wins(self):
        self.assertEqual(fallback_lookup('411001'), {'city': 'Pune', 'state': 'Maharashtra'})
        self.assertEqual(fallback_lookup('400001'), {'city': 'Mumbai/Thane', 'state': 'Maharashtra'})

    def test_two_digit_prefix(self):
        self.assertEqual(fallback_lookup('110001'), {'city': 'Delhi', 'state': 'Delhi'})

    def test_unknown_prefix(self):
        self.assertIsNone(fallback_lookup('999999'))


class PincodeCheckTests(TestCase):

    def setUp(self):
        self.client = AuthenticatedAPIClient()

    def test_invalid_format(self):
        for pincode in ('12345', '1234567', 'abcdef'):
            response = self.client.get(f'/api/delivery/check/{pincode}')
            self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
            self.assertEqual(response.data['message'], 'Invalid pincode format')

    def test_database_area_wins(self):
        TestDataFactory.create_area(pincode='380015', city='Ahmedabad', state='Gujarat')
        response = self.client.get('/api/delivery/check/380015')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {'available': True, 'city': 'Ahmedabad', 'state': 'Gujarat', 'source': 'db'})

    def test_inactive_area_uses_fallback(self):
        TestDataFactory.create_area(pincode='380015', city='Ahmedabad', is_active=False)
        response = self.client.get('/api/delivery/check/380015')
        self.assertEqual(response.data['source'], 'fallback')
        self.assertEqual(response.data['city'], 'Gujarat Area')

    def test_fallback_city(self):
        response = self.client.get('/api/delivery/check/560001')
        self.assertEqual(response.data, {
            'available': True, 'city': 'Bengaluru', 'state': 'Karnataka', 'source': 'fallback'
        })

    def test_not_serviceable(self):
        response = self.client.get('/api/delivery/check/999999')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {'available': False})


class ServiceableAreaAdminTests(TestCase):

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(TestDataFactory.create_admin())

    def test_create_and_list(self):
        response = self.client.post('/api/delivery', {'pincode': '395003', 'city': 'Surat', 'state': 'Gujarat'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(response.data['isActive'])
        response = self.client.get('/api/delivery')
        self.assertEqual([a['pincode'] for a in response.data], ['395003'])

    def test_create_rejects_bad_pincode(self):
        response = self.client.post('/api/delivery', {'pincode': '39500', 'city': 'Surat', 'state': 'Gujarat'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_create_rejects_duplicate(self):
        TestDataFactory.create_area(pincode='395003')
        response = self.client.post('/api/delivery', {'pincode': '395003', 'city': 'Surat', 'state': 'Gujarat'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_update_and_delete(self):
        area = TestDataFactory.create_area(pincode='395003')
        response = self.client.put(f'/api/delivery/{area.id}', {'isActive': False}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(ServiceableArea.objects.get(pk=area.pk).is_active)
        response = self.client.delete(f'/api/delivery/{area.id}')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(ServiceableArea.objects.filter(pk=area.pk).exists())

    def test_bulk_skips_duplicates(self):
        TestDataFactory.create_area(pincode='380015')
        response = self.client.post('/api/delivery/bulk', [
            {'pincode': '380015', 'city': 'Ahmedabad', 'state': 'Gujarat'},
            {'pincode': '380016', 'city': 'Ahmedabad', 'state': 'Gujarat'},
            {'pincode': '380016', 'city': 'Ahmedabad', 'state': 'Gujarat'},
            {'pincode': 'bad', 'city': 'Nowhere', 'state': 'None'},
        ], format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['created'], 1)
        self.assertEqual(response.data['skipped'], 2)
        self.assertEqual(len(response.data['errors']), 1)
        self.assertEqual(ServiceableArea.objects.count(), 2)

    def test_bulk_requires_list(self):
        response = self.client.post('/api/delivery/bulk', {'pincode': '380015'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_admin_routes_forbidden_for_customers(self):
        self.client.authenticate_user(TestDataFactory.create_user())
        self.assertEqual(self.client.get('/api/delivery').status_code, status.HTTP_403_FORBIDDEN)
