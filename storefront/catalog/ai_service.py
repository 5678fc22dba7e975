"""
Generative model client for drafting product catalog data from a photo.
Calls the Gemini REST API, falling back through candidate models until one answers.
"""
import base64
import json
import logging
import re

import requests
from django.conf import settings

logger = logging.getLogger(__name__)

CANDIDATE_MODELS = [
    'gemini-2.5-flash',
    'gemini-2.0-flash',
    'gemini-1.5-flash',
    'gemini-1.5-flash-latest',
]
REGENERATE_MODEL = 'gemini-1.5-flash'

ALLOWED_IMAGE_TYPES = ('jpg', 'jpeg', 'png', 'webp')

SEO_TITLE_MAX = 60
SEO_DESCRIPTION_MAX = 155

CODE_FENCE = re.compile(r'```(?:json)?')


class GenerationError(Exception):
    """The generative model could not produce a usable answer"""

    def __init__(self, message, raw=None):
        super().__init__(message)
        self.raw = raw


class MissingAPIKey(GenerationError):
    pass


PRODUCT_PROMPT = """
You are an expert furniture product catalog manager.
Analyze the provided product image and automatically generate structured data for a product creation form.

STRICT RULES:
- Tone: {positioning}, Professional, Furniture-focused.
- Vocabulary: Use premium furniture terms (e.g., "Ergonomic", "Kiln-dried", "High-density").
- NO brand name ({brand_name}) inside the "name" field. The name should be generic but SEO-friendly.
- NO Emojis.
- NO Marketing Fluff. Stick to facts and benefits.
- Dimensions: Estimate L x W x H in cm.

Context:
- Brand: {brand_name}
- Branding Positioning: {positioning}
- Target Market: {target_market}

Generate the following JSON structure (Strict keys):
{{
    "category": "Suggested Category Name",
    "subCategory": "Suggested Sub-Category",
    "name": "SEO Optimized Product Name (No Brand Name)",
    "shortDescription": "1-2 concise lines summarizing the product.",
    "longDescription": "Detailed description highlighting design, comfort, and durability.",
    "features": ["Feature 1", "Feature 2", "Feature 3", "Feature 4", "Feature 5"],
    "materialsUsed": ["Material 1", "Material 2"],
    "idealFor": ["Use Case 1", "Use Case 2"],
    "colors": [{{"name": "Color Name", "hex": "#HEXCODE"}}],
    "warranty_coverage": ["Point 1", "Point 2"],
    "warranty_care": ["Instruction 1", "Instruction 2"],
    "specifications": [{{"label": "Specification Name", "value": "Value"}}],
    "dimensions": {{
        "seatHeight": "Value cm",
        "seatWidth": "Value cm",
        "seatDepth": "Value cm",
        "backHeight": "Value cm",
        "armrestHeight": "Value cm",
        "overallHeight": "Value cm",
        "baseDiameter": "Value cm",
        "netWeight": "Value kg"
    }},
    "seoTitle": "SEO Title (60 chars max)",
    "seoDescription": "Meta Description (155 chars max)",
    "seoKeywords": ["keyword1", "keyword2", "keyword3"],
    "sku": "Generated-SKU-001",
    "price": 15000,
    "mrp": 25000,
    "aiGenerated": true
}}

Return ONLY the raw JSON object. No markdown formatting.
"""

FIELD_PROMPT = """
You are an expert furniture product copywriter.
Analyze the provided product image.
Regenerate ONLY the content for the field: "{field_name}".

Context:
- Brand: {brand_name}
- Positioning: {positioning}
- Current Content (to improve): "{current_value}"

Rules:
- Premium, professional tone.
- NO Emojis.
- For "longDescription", write a detailed paragraph.
- For "shortDescription", write 1-2 lines.
- For "features", provide a JSON array of strings.
- For any other text field, provide a string.

Return ONLY the raw content. No surrounding JSON object key.
"""


def is_allowed_image(uploaded_file):
    """Accept jpg/jpeg/png/webp by both extension and content type"""
    name = (uploaded_file.name or '').lower()
    extension = name.rsplit('.', 1)[-1] if '.' in name else ''
    content_type = (getattr(uploaded_file, 'content_type', '') or '').lower()
    return extension in ALLOWED_IMAGE_TYPES and any(t in content_type for t in ALLOWED_IMAGE_TYPES)


def strip_code_fences(text):
    return CODE_FENCE.sub('', text or '').strip()


def call_model(model, prompt, image_bytes, mime_type):
    """Single generateContent call; returns the first candidate's text"""
    api_key = settings.GOOGLE_API_KEY
    if not api_key:
        raise MissingAPIKey('Server configuration error: AI Key missing')

    payload = {
        'contents': [{
            'parts': [
                {'text': prompt},
                {'inline_data': {
                    'mime_type': mime_type,
                    'data': base64.b64encode(image_bytes).decode('ascii'),
                }},
            ],
        }],
    }
    response = requests.post(
        settings.GENERATIVE_API_URL.format(model=model),
        params={'key': api_key},
        json=payload,
        timeout=settings.GENERATIVE_TIMEOUT,
    )
    response.raise_for_status()
    body = response.json()
    try:
        return body['candidates'][0]['content']['parts'][0]['text']
    except (KeyError, IndexError, TypeError):
        raise GenerationError(f'Model {model} returned no text', raw=json.dumps(body)[:2000])


def generate_with_fallback(prompt, image_bytes, mime_type, models=None):
    """Try each candidate model in order; raise the last error if all fail"""
    last_error = None
    for model in models or CANDIDATE_MODELS:
        try:
            logger.info(f"Trying generative model: {model}")
            text = call_model(model, prompt, image_bytes, mime_type)
            logger.info(f"Generative model succeeded: {model}")
            return text
        except MissingAPIKey:
            raise
        except (requests.exceptions.RequestException, GenerationError) as e:
            logger.warning(f"Generative model {model} failed: {str(e)}")
            last_error = e
    if isinstance(last_error, GenerationError):
        raise last_error
    raise GenerationError(str(last_error) if last_error else 'All models failed')


def _truncate(value, limit):
    if value and len(value) > limit:
        return value[:limit - 3] + '...'
    return value


def generate_product_data(image_bytes, mime_type, brand_name='Dipak Furniture',
                          positioning='Premium', target_market='Home'):
    """Draft a full product payload from a photo"""
    prompt = PRODUCT_PROMPT.format(
        brand_name=brand_name, positioning=positioning, target_market=target_market
    )
    text = generate_with_fallback(prompt, image_bytes, mime_type)
    cleaned = strip_code_fences(text)
    try:
        data = json.loads(cleaned)
    except ValueError:
        logger.error(f"Failed to parse generative model response: {text[:500]}")
        raise GenerationError('Failed to parse AI response', raw=text)
    if not isinstance(data, dict):
        raise GenerationError('Failed to parse AI response', raw=text)

    data['seoTitle'] = _truncate(data.get('seoTitle'), SEO_TITLE_MAX)
    data['seoDescription'] = _truncate(data.get('seoDescription'), SEO_DESCRIPTION_MAX)
    return data


def regenerate_field(field_name, image_bytes, mime_type, brand_name='Dipak Furniture',
                     positioning='Premium', current_value=None):
    """Rewrite a single product field; plain strings come back unquoted"""
    prompt = FIELD_PROMPT.format(
        field_name=field_name, brand_name=brand_name, positioning=positioning,
        current_value=current_value or 'None'
    )
    text = generate_with_fallback(prompt, image_bytes, mime_type, models=[REGENERATE_MODEL])
    cleaned = strip_code_fences(text)
    if field_name != 'features' and len(cleaned) >= 2 and cleaned.startswith('"') and cleaned.endswith('"'):
        cleaned = cleaned[1:-1]
    return cleaned
