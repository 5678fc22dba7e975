"""
Tests for auth, audit logs, dashboard and health endpoints
"""
from django.contrib.auth.models import AnonymousUser
from django.test import RequestFactory, TestCase
from rest_framework import status
from storefront.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from storefront.catalog.models import Product, ProductReview
from storefront.core.models import AuditLog, User
from storefront.core.utils import record_audit


class UserModelTests(TestCase):
    """Role helpers on the user model"""

    def test_superadmin_is_admin_and_editor(self):
        user = TestDataFactory.create_admin()
        self.assertTrue(user.is_admin)
        self.assertTrue(user.is_catalog_editor)

    def test_editor_is_not_admin(self):
        user = TestDataFactory.create_editor()
        self.assertFalse(user.is_admin)
        self.assertTrue(user.is_catalog_editor)

    def test_staff_customer_is_admin(self):
        user = TestDataFactory.create_user(is_staff=True)
        self.assertTrue(user.is_admin)

    def test_customer_has_no_back_office_access(self):
        user = TestDataFactory.create_user()
        self.assertFalse(user.is_admin)
        self.assertFalse(user.is_catalog_editor)


class AuthAPITests(TestCase):
    """Signup, login, refresh and me"""

    def setUp(self):
        self.client = AuthenticatedAPIClient()

    def test_signup_returns_tokens(self):
        response = self.client.post('/api/auth/signup', {
            'name': 'Ravi Shah',
            'email': 'Ravi@Example.com',
            'phoneNumber': '9000000001',
            'password': 'strongpass1',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(response.data['success'])
        self.assertIn('access', response.data)
        self.assertIn('refresh', response.data)
        self.assertEqual(response.data['user']['email'], 'ravi@example.com')
        self.assertEqual(response.data['user']['role'], 'customer')

    def test_signup_rejects_duplicate_email(self):
        TestDataFactory.create_user(email='taken@example.com')
        response = self.client.post('/api/auth/signup', {
            'name': 'Someone',
            'email': 'taken@example.com',
            'password': 'strongpass1',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('email', response.data)

    def test_signup_rejects_duplicate_phone(self):
        user = TestDataFactory.create_user()
        user.phone_number = '9000000002'
        user.save()
        response = self.client.post('/api/auth/signup', {
            'name': 'Someone',
            'email': 'new@example.com',
            'phoneNumber': '9000000002',
            'password': 'strongpass1',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('phoneNumber', response.data)

    def test_login_returns_user_and_tokens(self):
        TestDataFactory.create_user(email='login@example.com', password='secret123')
        response = self.client.post('/api/auth/login', {
            'email': 'login@example.com',
            'password': 'secret123',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access', response.data)
        self.assertEqual(response.data['user']['email'], 'login@example.com')

    def test_login_with_wrong_password(self):
        TestDataFactory.create_user(email='login@example.com', password='secret123')
        response = self.client.post('/api/auth/login', {
            'email': 'login@example.com',
            'password': 'wrong',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_refresh_token(self):
        TestDataFactory.create_user(email='login@example.com', password='secret123')
        login = self.client.post('/api/auth/login', {
            'email': 'login@example.com',
            'password': 'secret123',
        }, format='json')
        response = self.client.post('/api/auth/refresh', {'refresh': login.data['refresh']}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access', response.data)

    def test_refresh_with_garbage_token(self):
        response = self.client.post('/api/auth/refresh', {'refresh': 'not-a-token'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_me_requires_authentication(self):
        response = self.client.get('/api/auth/me')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_me_returns_current_user(self):
        user = TestDataFactory.create_user(name='Meera')
        self.client.authenticate_user(user)
        response = self.client.get('/api/auth/me')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['name'], 'Meera')
        self.assertFalse(response.data['isAdmin'])


class AuditLogTests(TestCase):
    """Audit trail helper and admin listing"""

    def setUp(self):
        self.admin = TestDataFactory.create_admin()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.admin)

    def test_unsaved_instance_is_skipped(self):
        product = Product(name='Draft', sku='DRAFT-1')
        self.assertIsNone(record_audit('create', product))
        self.assertIsNone(record_audit('create', None))
        self.assertEqual(AuditLog.objects.count(), 0)

    def test_product_identity(self):
        product = TestDataFactory.create_product(name='Oak Bed', sku='BED-OAK')
        log = record_audit('stock_adjust', product, user=self.admin, changes={'before': 5, 'after': 3})
        self.assertEqual(log.model_name, 'Product')
        self.assertEqual(log.object_id, str(product.id))
        self.assertEqual(log.object_name, 'Oak Bed')
        self.assertEqual(log.object_reference, 'BED-OAK')
        self.assertEqual(log.user, self.admin)
        self.assertEqual(log.changes, {'before': 5, 'after': 3})

    def test_review_identity_points_at_product(self):
        product = TestDataFactory.create_product(name='Oak Bed', sku='BED-OAK')
        review = ProductReview.objects.create(product=product, name='Asha', rating=4, comment='Sturdy')
        log = record_audit('review_approve', review)
        self.assertEqual(log.model_name, 'ProductReview')
        self.assertEqual(log.object_id, str(review.id))
        self.assertEqual(log.object_reference, 'BED-OAK')

    def test_user_and_ip_from_request(self):
        product = TestDataFactory.create_product()
        request = RequestFactory().post('/api/products', HTTP_X_FORWARDED_FOR='203.0.113.7, 10.0.0.1')
        request.user = self.admin
        log = record_audit('create', product, request)
        self.assertEqual(log.user, self.admin)
        self.assertEqual(log.ip_address, '203.0.113.7')

    def test_anonymous_request_has_no_user(self):
        product = TestDataFactory.create_product()
        request = RequestFactory().get('/api/products')
        request.user = AnonymousUser()
        log = record_audit('update', product, request)
        self.assertIsNone(log.user)
        self.assertEqual(log.ip_address, '127.0.0.1')

    def test_list_filters_by_action(self):
        product = TestDataFactory.create_product()
        record_audit('create', product, user=self.admin)
        record_audit('stock_adjust', product, user=self.admin)
        response = self.client.get('/api/audit-logs', {'action': 'stock_adjust'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)
        self.assertEqual(response.data[0]['modelName'], 'Product')

    def test_list_filters_by_reference(self):
        record_audit('create', TestDataFactory.create_product(sku='SOFA-1'), user=self.admin)
        record_audit('create', TestDataFactory.create_product(sku='SOFA-2'), user=self.admin)
        response = self.client.get('/api/audit-logs', {'reference': 'SOFA-2'})
        self.assertEqual(len(response.data), 1)

    def test_list_forbidden_for_customers(self):
        customer = TestDataFactory.create_user()
        self.client.authenticate_user(customer)
        response = self.client.get('/api/audit-logs')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_detail(self):
        product = TestDataFactory.create_product()
        log = record_audit('delete', product, user=self.admin)
        response = self.client.get(f'/api/audit-logs/{log.id}')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['objectId'], str(product.id))


class DashboardTests(TestCase):

    def setUp(self):
        self.client = AuthenticatedAPIClient()

    def test_stats_counts(self):
        admin = TestDataFactory.create_admin()
        TestDataFactory.create_product(stock=2)
        TestDataFactory.create_product(stock=50)
        self.client.authenticate_user(admin)
        response = self.client.get('/api/dashboard/stats')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['stats']['products'], 2)
        self.assertEqual(response.data['stats']['lowStock'], 1)
        self.assertEqual(response.data['stats']['users'], User.objects.count())
        self.assertEqual(response.data['recentActivity'], [])

    def test_stats_requires_admin(self):
        self.client.authenticate_user(TestDataFactory.create_editor())
        response = self.client.get('/api/dashboard/stats')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_health_is_public(self):
        response = self.client.get('/api/health')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'ok')
