"""
Test suite for the catalog: derived stock fields, listing filters, product CRUD,
quick stock edits, reviews and the generative product-data endpoints
"""
from decimal import Decimal
from unittest import mock

import requests
from django.core.cache import cache
from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase, override_settings
from rest_framework import status

from storefront.core.models import AuditLog
from storefront.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from storefront.catalog.models import Category, Product, ProductColor, ProductReview, derive_stock_status
from storefront.catalog.utils import parse_colors, parse_multi_line, clean_upload_path
from storefront.catalog import ai_service


class DerivedFieldTests(TestCase):
    """Stock status, color sums, discount and review stats recomputed on save"""

    def test_derive_stock_status(self):
        self.assertEqual(derive_stock_status(0, 5), 'Out of Stock')
        self.assertEqual(derive_stock_status(-2, 5), 'Out of Stock')
        self.assertEqual(derive_stock_status(5, 5), 'Low Stock')
        self.assertEqual(derive_stock_status(6, 5), 'In Stock')

    def test_zero_min_stock_falls_back_to_default(self):
        self.assertEqual(derive_stock_status(4, 0), 'Low Stock')
        self.assertEqual(derive_stock_status(6, 0), 'In Stock')

    def test_stock_is_sum_of_colors(self):
        product = TestDataFactory.create_product(stock=99, colors=[('Black', 4), ('Walnut', 8)])
        product.refresh_from_db()
        self.assertEqual(product.stock, 12)
        self.assertEqual(product.stock_status, 'In Stock')
        black = product.colors.get(name='Black')
        self.assertEqual(black.status, 'Low Stock')

    def test_find_color_matches_exact_name(self):
        product = TestDataFactory.create_product(colors=[('Black', 4), ('Walnut', 8)])
        self.assertEqual(product.find_color('Walnut').stock, 8)
        self.assertIsNone(product.find_color('walnut'))
        self.assertIsNone(product.find_color(None))

    def test_product_without_colors_keeps_scalar_stock(self):
        product = TestDataFactory.create_product(stock=0)
        self.assertEqual(product.stock, 0)
        self.assertEqual(product.stock_status, 'Out of Stock')

    def test_discount_percent(self):
        product = TestDataFactory.create_product(price='15000', mrp='20000')
        self.assertEqual(product.discount_percent, 25)

    def test_discount_is_zero_when_price_not_below_mrp(self):
        product = TestDataFactory.create_product(price='20000', mrp='20000')
        self.assertEqual(product.discount_percent, 0)

    def test_only_approved_reviews_count(self):
        product = TestDataFactory.create_product()
        ProductReview.objects.create(product=product, name='A', rating=5, comment='Great', is_approved=True)
        ProductReview.objects.create(product=product, name='B', rating=4, comment='Good', is_approved=True)
        ProductReview.objects.create(product=product, name='C', rating=1, comment='Bad', is_approved=False)
        product.save()
        self.assertEqual(product.review_count, 2)
        self.assertEqual(product.average_rating, Decimal('4.5'))

    def test_category_slug_follows_name(self):
        category = TestDataFactory.create_category(name='Office Chairs')
        self.assertEqual(category.slug, 'office-chairs')
        category.name = 'Ergonomic Chairs'
        category.save()
        self.assertEqual(category.slug, 'ergonomic-chairs')


class CatalogUtilsTests(TestCase):

    def test_parse_multi_line_accepts_separators(self):
        self.assertEqual(parse_multi_line('Solid wood\nFoam, Steel|Fabric'), ['Solid wood', 'Foam', 'Steel', 'Fabric'])
        self.assertEqual(parse_multi_line(['One', ' Two ']), ['One', 'Two'])
        self.assertEqual(parse_multi_line(None), [])

    def test_parse_colors_from_names(self):
        colors = parse_colors('Black, Walnut')
        self.assertEqual([c['name'] for c in colors], ['Black', 'Walnut'])
        self.assertEqual(colors[0]['hex'], '#000000')
        self.assertEqual(colors[1]['hex'], '#808080')

    def test_parse_colors_from_json(self):
        colors = parse_colors('[{"name": "Teal", "hex": "#008080"}]')
        self.assertEqual(colors, [{'name': 'Teal', 'hex': '#008080', 'images': []}])

    def test_clean_upload_path(self):
        self.assertEqual(clean_upload_path('http://host:5000/uploads/a.jpg'), '/uploads/a.jpg')
        self.assertEqual(clean_upload_path('https://cdn.example.com/a.jpg'), 'https://cdn.example.com/a.jpg')


class CategoryAPITests(TestCase):

    def setUp(self):
        cache.clear()
        self.client = AuthenticatedAPIClient()
        self.editor = TestDataFactory.create_editor()

    def test_public_list_hides_inactive(self):
        TestDataFactory.create_category(name='Sofas', display_order=2)
        TestDataFactory.create_category(name='Beds', display_order=1)
        TestDataFactory.create_category(name='Archived', is_active=False)
        response = self.client.get('/api/categories')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([c['name'] for c in response.data], ['Beds', 'Sofas'])

    def test_all_includes_inactive(self):
        TestDataFactory.create_category(name='Archived', is_active=False)
        response = self.client.get('/api/categories', {'all': 'true'})
        self.assertEqual(len(response.data), 1)

    def test_create_invalidates_cached_list(self):
        TestDataFactory.create_category(name='Sofas')
        self.assertEqual(len(self.client.get('/api/categories').data), 1)
        self.client.authenticate_user(self.editor)
        response = self.client.post('/api/categories', {'name': 'Tables'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['slug'], 'tables')
        self.assertEqual(len(self.client.get('/api/categories').data), 2)

    def test_list_is_cached_per_variant_until_a_save(self):
        category = TestDataFactory.create_category(name='Sofas')
        self.assertEqual(self.client.get('/api/categories').data[0]['name'], 'Sofas')
        # queryset updates skip signals, so the cached copy stays
        Category.objects.filter(pk=category.pk).update(name='Couches')
        self.assertEqual(self.client.get('/api/categories').data[0]['name'], 'Sofas')
        self.assertEqual(self.client.get('/api/categories', {'all': 'true'}).data[0]['name'], 'Couches')
        category.refresh_from_db()
        category.save()
        self.assertEqual(self.client.get('/api/categories').data[0]['name'], 'Couches')

    def test_create_requires_editor(self):
        self.client.authenticate_user(TestDataFactory.create_user())
        response = self.client.post('/api/categories', {'name': 'Tables'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_delete_with_products_is_rejected(self):
        product = TestDataFactory.create_product()
        self.client.authenticate_user(self.editor)
        response = self.client.delete(f'/api/categories/{product.category_id}')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(Category.objects.filter(pk=product.category_id).exists())

    def test_delete_empty_category(self):
        category = TestDataFactory.create_category()
        self.client.authenticate_user(self.editor)
        response = self.client.delete(f'/api/categories/{category.id}')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(Category.objects.filter(pk=category.id).exists())


class ProductListTests(TestCase):
    """Public listing filters and sorting"""

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.seating = TestDataFactory.create_category(name='Seating')
        self.chairs = TestDataFactory.create_category(name='Chairs', parent=self.seating)
        self.tables = TestDataFactory.create_category(name='Tables')
        self.chair = TestDataFactory.create_product(
            name='Mesh Chair', category=self.chairs, price='5000', mrp='10000',
            colors=[('Black', 5), ('Grey', 5)], materials_used=['Mesh', 'Steel'],
            tags=['Ergonomic'], is_best_seller=True,
        )
        self.table = TestDataFactory.create_product(
            name='Oak Table', category=self.tables, price='25000', mrp='25000',
            materials_used=['Oak'],
        )
        self.deleted = TestDataFactory.create_product(name='Old Stool', category=self.chairs, is_deleted=True)

    def names(self, params=None):
        response = self.client.get('/api/products', params or {})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        return [p['name'] for p in response.data]

    def test_deleted_products_are_hidden(self):
        self.assertNotIn('Old Stool', self.names())

    def test_category_slug_includes_children(self):
        self.assertEqual(self.names({'categorySlug': 'seating'}), ['Mesh Chair'])

    def test_unknown_category_slug_is_empty(self):
        self.assertEqual(self.names({'categorySlug': 'nope'}), [])

    def test_price_range(self):
        self.assertEqual(self.names({'priceMin': '10000'}), ['Oak Table'])
        self.assertEqual(self.names({'priceMax': '10000'}), ['Mesh Chair'])

    def test_discount_min(self):
        self.assertEqual(self.names({'discountMin': '40'}), ['Mesh Chair'])

    def test_colors_case_insensitive(self):
        self.assertEqual(self.names({'colors': 'black,white'}), ['Mesh Chair'])

    def test_materials(self):
        self.assertEqual(self.names({'materials': 'oak'}), ['Oak Table'])

    def test_flag_tags(self):
        self.assertEqual(self.names({'tags': 'Best Seller'}), ['Mesh Chair'])

    def test_plain_tags(self):
        self.assertEqual(self.names({'tags': 'Ergonomic'}), ['Mesh Chair'])

    def test_sort_by_price(self):
        self.assertEqual(self.names({'sort': 'price_asc'}), ['Mesh Chair', 'Oak Table'])
        self.assertEqual(self.names({'sort': 'price_desc'}), ['Oak Table', 'Mesh Chair'])

    def test_list_shape(self):
        response = self.client.get('/api/products', {'categorySlug': 'chairs'})
        product = response.data[0]
        self.assertEqual(product['category']['slug'], 'chairs')
        self.assertEqual([c['name'] for c in product['colors']], ['Black', 'Grey'])
        self.assertEqual(product['stock'], 10)
        self.assertEqual(product['discountPercent'], 50)

    def test_search_requires_query(self):
        response = self.client.get('/api/products/search')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_search_matches_color_name(self):
        response = self.client.get('/api/products/search', {'q': 'grey'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([p['name'] for p in response.data], ['Mesh Chair'])
        self.assertEqual(response.data[0]['category'], 'Chairs')

    def test_search_limit(self):
        for i in range(10):
            TestDataFactory.create_product(name=f'Lounge Sofa {i}', category=self.tables)
        response = self.client.get('/api/products/search', {'q': 'lounge'})
        self.assertEqual(len(response.data), 8)


class ProductWriteTests(TestCase):
    """Editor product CRUD and quick stock edits"""

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.editor = TestDataFactory.create_editor()
        self.client.authenticate_user(self.editor)
        self.category = TestDataFactory.create_category(name='Chairs')

    def test_create_with_color_names(self):
        response = self.client.post('/api/products', {
            'name': 'Task Chair',
            'sku': 'TC-001',
            'category': self.category.id,
            'price': '8000',
            'mrp': '10000',
            'features': 'Lumbar support\nTilt lock',
            'colors': ['Black', 'Ocean'],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['features'], ['Lumbar support', 'Tilt lock'])
        self.assertEqual([c['hex'] for c in response.data['colors']], ['#000000', '#808080'])
        self.assertEqual(response.data['discountPercent'], 20)
        self.assertTrue(AuditLog.objects.filter(action='create', model_name='Product').exists())

    def test_create_requires_editor(self):
        self.client.authenticate_user(TestDataFactory.create_user())
        response = self.client.post('/api/products', {
            'name': 'Task Chair', 'sku': 'TC-001', 'category': self.category.id,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_update_keeps_color_stock(self):
        product = TestDataFactory.create_product(category=self.category, colors=[('Black', 7)])
        response = self.client.put(f'/api/products/{product.id}', {
            'name': 'Renamed Chair',
            'sku': product.sku,
            'category': self.category.id,
            'colors': [{'name': 'Black', 'hex': '#111111'}, {'name': 'White'}],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        product.refresh_from_db()
        self.assertEqual(product.name, 'Renamed Chair')
        self.assertEqual(product.colors.get(name='Black').stock, 7)
        self.assertEqual(product.stock, 7)
        self.assertEqual(len(response.data['colors']), 2)

    def test_soft_delete(self):
        product = TestDataFactory.create_product(category=self.category)
        response = self.client.delete(f'/api/products/{product.id}')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        product.refresh_from_db()
        self.assertTrue(product.is_deleted)
        self.assertEqual(self.client.get(f'/api/products/{product.id}').status_code, status.HTTP_404_NOT_FOUND)

    def test_detail_is_public(self):
        product = TestDataFactory.create_product(category=self.category)
        self.client.logout()
        response = self.client.get(f'/api/products/{product.id}')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['reviews'], [])

    def test_stock_patch_scalar(self):
        product = TestDataFactory.create_product(category=self.category, stock=20)
        response = self.client.patch(f'/api/products/{product.id}/stock', {'stock': 3}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['stock'], 3)
        self.assertEqual(response.data['stockStatus'], 'Low Stock')
        self.assertTrue(AuditLog.objects.filter(action='stock_adjust', object_id=str(product.id)).exists())

    def test_stock_patch_variants_by_id_and_sku(self):
        product = TestDataFactory.create_product(category=self.category, colors=[('Black', 4), ('Walnut', 6)])
        black = product.colors.get(name='Black')
        walnut = product.colors.get(name='Walnut')
        walnut.sku = 'WAL-1'
        walnut.save()
        response = self.client.patch(f'/api/products/{product.id}/stock', {
            'variants': [{'id': black.id, 'stock': 0}, {'sku': 'WAL-1', 'stock': 9}],
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        product.refresh_from_db()
        self.assertEqual(product.stock, 9)
        self.assertEqual(ProductColor.objects.get(pk=black.pk).status, 'Out of Stock')

    def test_stock_patch_rejects_non_numbers(self):
        product = TestDataFactory.create_product(category=self.category, stock=20)
        response = self.client.patch(f'/api/products/{product.id}/stock', {'stock': 'lots'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        product.refresh_from_db()
        self.assertEqual(product.stock, 20)


class ReviewTests(TestCase):

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.customer = TestDataFactory.create_user(name='Kiran')
        self.editor = TestDataFactory.create_editor()
        self.product = TestDataFactory.create_product()

    def test_review_needs_approval(self):
        self.client.authenticate_user(self.customer)
        response = self.client.post(f'/api/products/{self.product.id}/reviews',
                                    {'rating': 4, 'comment': 'Comfortable'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        review = ProductReview.objects.get(product=self.product)
        self.assertEqual(review.name, 'Kiran')
        self.assertFalse(review.is_approved)
        self.product.refresh_from_db()
        self.assertEqual(self.product.review_count, 0)

    def test_one_review_per_user(self):
        self.client.authenticate_user(self.customer)
        url = f'/api/products/{self.product.id}/reviews'
        self.client.post(url, {'rating': 4, 'comment': 'Comfortable'}, format='json')
        response = self.client.post(url, {'rating': 5, 'comment': 'Again'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['message'], 'Product already reviewed')

    def test_rating_out_of_range(self):
        self.client.authenticate_user(self.customer)
        response = self.client.post(f'/api/products/{self.product.id}/reviews',
                                    {'rating': 6, 'comment': 'Too good'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_approve_and_delete_update_stats(self):
        review = ProductReview.objects.create(product=self.product, user=self.customer, name='Kiran',
                                              rating=3, comment='Fine')
        self.client.authenticate_user(self.editor)
        response = self.client.put(f'/api/products/{self.product.id}/reviews/{review.id}/approve')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.product.refresh_from_db()
        self.assertEqual(self.product.review_count, 1)
        self.assertEqual(self.product.average_rating, Decimal('3.0'))

        response = self.client.delete(f'/api/products/{self.product.id}/reviews/{review.id}')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.product.refresh_from_db()
        self.assertEqual(self.product.review_count, 0)

    def test_approve_missing_review(self):
        self.client.authenticate_user(self.editor)
        response = self.client.put(f'/api/products/{self.product.id}/reviews/999/approve')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


def model_response(text):
    response = mock.Mock()
    response.raise_for_status.return_value = None
    response.json.return_value = {'candidates': [{'content': {'parts': [{'text': text}]}}]}
    return response


@override_settings(GOOGLE_API_KEY='test-key')
class AIGenerateTests(TestCase):
    """Generative product data with the model HTTP calls mocked"""

    def setUp(self):
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(TestDataFactory.create_editor())

    def image(self, name='chair.png', content_type='image/png'):
        return SimpleUploadedFile(name, b'\x89PNG fake image bytes', content_type=content_type)

    @mock.patch('storefront.catalog.ai_service.requests.post')
    def test_generate_strips_fences_and_trims_seo(self, post):
        post.return_value = model_response(
            '```json\n{"name": "Ergonomic Chair", "seoTitle": "%s", "seoDescription": "Short"}\n```' % ('T' * 80)
        )
        response = self.client.post('/api/ai/generate', {'image': self.image()}, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['name'], 'Ergonomic Chair')
        self.assertEqual(len(response.data['seoTitle']), 60)
        self.assertTrue(response.data['seoTitle'].endswith('...'))
        self.assertEqual(response.data['seoDescription'], 'Short')
        self.assertEqual(post.call_args.kwargs['params'], {'key': 'test-key'})

    @mock.patch('storefront.catalog.ai_service.requests.post')
    def test_generate_falls_back_to_next_model(self, post):
        failing = mock.Mock()
        failing.raise_for_status.side_effect = requests.exceptions.HTTPError('404 model not found')
        post.side_effect = [failing, model_response('{"name": "Sofa"}')]
        response = self.client.post('/api/ai/generate', {'image': self.image()}, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(post.call_count, 2)
        self.assertIn(ai_service.CANDIDATE_MODELS[1], post.call_args.args[0])

    @mock.patch('storefront.catalog.ai_service.requests.post')
    def test_unparseable_output_echoes_raw(self, post):
        post.return_value = model_response('this is not json')
        response = self.client.post('/api/ai/generate', {'image': self.image()}, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(response.data['message'], 'Failed to parse AI response')
        self.assertEqual(response.data['raw'], 'this is not json')

    @override_settings(GOOGLE_API_KEY='')
    @mock.patch('storefront.catalog.ai_service.requests.post')
    def test_missing_key(self, post):
        response = self.client.post('/api/ai/generate', {'image': self.image()}, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertIn('AI Key missing', response.data['message'])
        post.assert_not_called()

    def test_missing_image(self):
        response = self.client.post('/api/ai/generate', {}, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_rejects_non_image(self):
        upload = self.image(name='notes.txt', content_type='text/plain')
        response = self.client.post('/api/ai/generate', {'image': upload}, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_requires_authentication(self):
        self.client.logout()
        response = self.client.post('/api/ai/generate', {'image': self.image()}, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    @mock.patch('storefront.catalog.ai_service.requests.post')
    def test_regenerate_single_field(self, post):
        post.return_value = model_response('"A refined one-line summary."')
        response = self.client.post('/api/ai/regenerate', {
            'image': self.image(),
            'fieldName': 'shortDescription',
            'currentValue': 'Old text',
        }, format='multipart')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['result'], 'A refined one-line summary.')
        self.assertIn(ai_service.REGENERATE_MODEL, post.call_args.args[0])
