# shared/services/shipping/jnt.py
"""
J&T Express Malaysia open platform client.
Handles signing, retries and response mapping for rates, shipments and tracking.
"""
import base64
import hashlib
import json
import logging
import time
from decimal import Decimal
from typing import Any, Dict, List, Optional

import requests
from django.conf import settings

from shared.constants import DEFAULT_CURRENCY
from shared.exceptions.shipping import ShippingConfigurationError, ShippingGatewayError

logger = logging.getLogger(__name__)

SERVICE_NAMES = {
    'EZ': 'J&T Domestic Standard',
    'EX': 'J&T Express Next Day',
    'FD': 'J&T Fresh Delivery',
}

DELIVERY_DAYS = {
    'EX': 1,
    'EZ': 3,
    'FD': 1,
}

SCAN_STATUS_MAP = {
    'PICKUP': 'picked_up',
    'GATEWAY_IN': 'in_transit',
    'GATEWAY_OUT': 'in_transit',
    'DELIVERY': 'out_for_delivery',
    'SIGNED': 'delivered',
    'PROBLEM': 'exception',
    'RETURN': 'returned',
}


class JntShippingService:
    """
    J&T Express API client.
    Credentials come from the shipping settings screen.
    """

    SANDBOX_BASE_URL = "https://demoopenapi.jtexpress.my/webopenplatformapi/api"
    PRODUCTION_BASE_URL = "https://ylopenapi.jtexpress.my/webopenplatformapi/api"
    TIMEOUT = 30
    MAX_RETRIES = 3
    SUCCESS_CODE = '1'

    # Fallback pricing when the price API gives nothing usable
    DEFAULT_BASE_PRICE = Decimal('6.00')
    DEFAULT_PRICE_PER_KG = Decimal('2.00')
    EXPRESS_MULTIPLIER = Decimal('1.5')

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        if config is None:
            from site_settings.services import SettingsService
            config = SettingsService.get_jnt_config()

        self.customer_code = config.get('customer_code') or ''
        self.private_key = config.get('private_key') or ''
        self.password = config.get('password') or ''
        self.sandbox = bool(config.get('sandbox', True))
        self.default_service_type = config.get('default_service_type') or 'EZ'

        if not self.customer_code or not self.private_key:
            logger.error("J&T Express credentials not configured")
            raise ShippingConfigurationError(
                "J&T Express is not configured. Please add the customer code and private key.",
                user_friendly=True
            )

    @property
    def base_url(self) -> str:
        if self.sandbox:
            return getattr(settings, 'JNT_SANDBOX_BASE_URL', self.SANDBOX_BASE_URL)
        return getattr(settings, 'JNT_PRODUCTION_BASE_URL', self.PRODUCTION_BASE_URL)

    def generate_digest(self, body_json: str) -> str:
        """Base64 of the raw MD5 bytes of body + private key."""
        raw = hashlib.md5(f"{body_json}{self.private_key}".encode('utf-8')).digest()
        return base64.b64encode(raw).decode('ascii')

    def _make_request(self, endpoint: str, payload: Dict, retry_count: int = 0) -> Dict[str, Any]:
        """
        Make a signed request to the J&T API with retry logic.

        Args:
            endpoint: API endpoint, e.g. '/order/price'
            payload: Business content, sent JSON encoded as 'bizContent'
            retry_count: Current retry attempt

        Returns:
            Dict: Decoded response body

        Raises:
            ShippingGatewayError: If the API cannot be reached or answers with an HTTP error
        """
        body_json = json.dumps(payload, separators=(',', ':'))
        headers = {
            'apiAccount': self.customer_code,
            'digest': self.generate_digest(body_json),
            'timestamp': str(int(time.time() * 1000)),
        }

        try:
            logger.debug(f"J&T POST {endpoint} - Attempt {retry_count + 1}")

            response = requests.post(
                f"{self.base_url}{endpoint}",
                data={'bizContent': body_json},
                headers=headers,
                timeout=self.TIMEOUT
            )
            response.raise_for_status()
            result = response.json()

            logger.debug(f"J&T {endpoint} response code: {result.get('code')}")
            return result

        except requests.exceptions.Timeout:
            if retry_count < self.MAX_RETRIES - 1:
                logger.warning(f"J&T timeout, retrying ({retry_count + 1}/{self.MAX_RETRIES})")
                return self._make_request(endpoint, payload, retry_count + 1)
            logger.error("J&T timeout after all retries")
            raise ShippingGatewayError("Shipping service timeout. Please try again.", user_friendly=True)

        except requests.exceptions.ConnectionError as e:
            if retry_count < self.MAX_RETRIES - 1:
                logger.warning(f"J&T connection error, retrying ({retry_count + 1}/{self.MAX_RETRIES})")
                return self._make_request(endpoint, payload, retry_count + 1)
            logger.error("J&T connection error after all retries")
            raise ShippingGatewayError(
                "Could not reach J&T Express. Please check your connection.",
                user_friendly=True,
                original_error=e
            )

        except requests.exceptions.HTTPError as e:
            status_code = e.response.status_code if e.response is not None else 0

            if 500 <= status_code < 600 and retry_count < self.MAX_RETRIES - 1:
                logger.warning(f"J&T server error {status_code}, retrying ({retry_count + 1}/{self.MAX_RETRIES})")
                return self._make_request(endpoint, payload, retry_count + 1)

            logger.error(f"J&T API request failed: {endpoint} returned HTTP {status_code}")
            raise ShippingGatewayError(f"J&T Express returned HTTP {status_code}.", original_error=e)

        except ValueError as e:
            logger.error(f"J&T returned a non-JSON response for {endpoint}")
            raise ShippingGatewayError("Invalid response from J&T Express.", original_error=e)

    def _is_success(self, response: Optional[Dict]) -> bool:
        return bool(response) and str(response.get('code', '')) == self.SUCCESS_CODE

    # ============ RATES ============

    def get_rates(self, origin_postcode: str, destination_postcode: str, weight_kg,
                  length_cm=1, width_cm=1, height_cm=1) -> List[Dict[str, Any]]:
        """Quote the default service; falls back to estimated rates on any failure."""
        payload = {
            'senderPostcode': origin_postcode,
            'receiverPostcode': destination_postcode,
            'weight': str(weight_kg),
            'length': str(length_cm or 1),
            'width': str(width_cm or 1),
            'height': str(height_cm or 1),
        }

        try:
            response = self._make_request('/order/price', payload)
        except ShippingGatewayError as e:
            logger.error(f"J&T price query failed: {e}")
            return self.get_default_rates(weight_kg)

        data = response.get('data') or {}
        if not self._is_success(response) or not isinstance(data, dict) or 'price' not in data:
            logger.warning(f"J&T price query returned no price: {response}")
            return self.get_default_rates(weight_kg)

        service = self.default_service_type
        return [{
            'provider': 'jnt',
            'service_name': self.map_service_name(service),
            'service_code': service,
            'cost': Decimal(str(data['price'])),
            'currency': DEFAULT_CURRENCY,
            'estimated_days': self.estimate_delivery_days(service),
            'metadata': data,
        }]

    def get_default_rates(self, weight_kg) -> List[Dict[str, Any]]:
        """Approximate standard and next-day prices from weight alone."""
        weight = max(Decimal(str(weight_kg or 0)), Decimal('0.5'))
        standard = self.DEFAULT_BASE_PRICE + max(weight - 1, Decimal('0')) * self.DEFAULT_PRICE_PER_KG
        express = standard * self.EXPRESS_MULTIPLIER

        return [
            {
                'provider': 'jnt',
                'service_name': SERVICE_NAMES['EZ'],
                'service_code': 'EZ',
                'cost': standard.quantize(Decimal('0.01')),
                'currency': DEFAULT_CURRENCY,
                'estimated_days': 3,
                'metadata': {'source': 'default_rates'},
            },
            {
                'provider': 'jnt',
                'service_name': SERVICE_NAMES['EX'],
                'service_code': 'EX',
                'cost': express.quantize(Decimal('0.01')),
                'currency': DEFAULT_CURRENCY,
                'estimated_days': 1,
                'metadata': {'source': 'default_rates'},
            },
        ]

    # ============ SHIPMENTS ============

    def create_shipment(self, shipment: Dict[str, Any]) -> Dict[str, Any]:
        """
        Book a pickup.

        Args:
            shipment: order_number, sender_* and receiver_* fields, weight_kg,
                      item_description, item_value, item_quantity, note, cod

        Returns:
            Dict with success, tracking_number, sorting_code, message, raw
        """
        service = shipment.get('service_code') or self.default_service_type
        payload = {
            'eccompanyid': self.customer_code,
            'customerPwd': self.password,
            'serviceType': service,
            'orderType': '1',
            'expressType': service,
            'deliveryType': '1',
            'payType': '2' if shipment.get('cod') else '1',
            'goodsType': 'ITN1',
            'totalQuantity': str(shipment.get('item_quantity') or 1),
            'weight': str(shipment.get('weight_kg') or 1),
            'itemsValue': str(shipment.get('item_value') or 0),
            'priceCurrency': DEFAULT_CURRENCY,
            'remark': shipment.get('note') or '',
            'txlogisticId': shipment['order_number'],
            'senderName': shipment.get('sender_name', ''),
            'senderMobile': shipment.get('sender_phone', ''),
            'senderPhone': shipment.get('sender_phone', ''),
            'senderAddress': shipment.get('sender_address', ''),
            'senderPostcode': shipment.get('sender_postal_code', ''),
            'senderCity': shipment.get('sender_city', ''),
            'senderProv': shipment.get('sender_state', ''),
            'receiverName': shipment.get('receiver_name', ''),
            'receiverMobile': shipment.get('receiver_phone', ''),
            'receiverPhone': shipment.get('receiver_phone', ''),
            'receiverAddress': shipment.get('receiver_address', ''),
            'receiverPostcode': shipment.get('receiver_postal_code', ''),
            'receiverCity': shipment.get('receiver_city', ''),
            'receiverProv': shipment.get('receiver_state', ''),
            'goodsName': shipment.get('item_description') or 'General Items',
        }

        try:
            response = self._make_request('/order/addOrder', payload)
        except ShippingGatewayError as e:
            logger.error(f"J&T create shipment failed for {shipment['order_number']}: {e}")
            return {'success': False, 'message': e.message, 'raw': {}}

        data = response.get('data') or {}
        success = self._is_success(response)
        message = response.get('msg') or response.get('message') or ''

        return {
            'success': success,
            'tracking_number': data.get('billCode') or data.get('billcode'),
            'sorting_code': data.get('sortingCode') or data.get('sortingcode'),
            'message': 'Shipment created successfully.' if success else message,
            'raw': response,
        }

    def get_tracking(self, tracking_number: str) -> Dict[str, Any]:
        try:
            response = self._make_request('/order/orderTrack', {'billCodes': tracking_number, 'lang': 'en'})
        except ShippingGatewayError as e:
            logger.error(f"J&T tracking query failed for {tracking_number}: {e}")
            return {'success': False, 'tracking_number': tracking_number, 'message': e.message}

        if not self._is_success(response):
            return {
                'success': False,
                'tracking_number': tracking_number,
                'message': response.get('msg') or 'Failed to retrieve tracking info.',
                'raw': response,
            }

        data = response.get('data') or []
        track = data[0] if isinstance(data, list) and data else data
        details = track.get('details', []) if isinstance(track, dict) else []

        events = [
            {
                'status': detail.get('scanType') or detail.get('scantype') or '',
                'datetime': detail.get('scanTime') or detail.get('scantime') or '',
                'location': detail.get('scanCity') or detail.get('scancity') or '',
                'description': detail.get('desc') or detail.get('scanStatus') or '',
            }
            for detail in details
        ]

        return {
            'success': True,
            'tracking_number': tracking_number,
            'current_status': self.map_status(events[0]['status'] if events else None),
            'events': events,
            'message': 'Tracking data retrieved.',
            'raw': response,
        }

    def cancel_shipment(self, tracking_number: str) -> Dict[str, Any]:
        try:
            response = self._make_request('/order/cancelOrder', {'billCode': tracking_number, 'orderType': 1})
        except ShippingGatewayError as e:
            logger.error(f"J&T cancel shipment failed for {tracking_number}: {e}")
            return {'success': False, 'message': e.message}

        success = self._is_success(response)
        return {
            'success': success,
            'message': 'Shipment cancelled successfully.' if success else (response.get('msg') or ''),
            'raw': response,
        }

    def test_connection(self) -> bool:
        """A price inquiry that returns any coded answer proves credentials reach the API."""
        payload = {
            'senderPostcode': '50000',
            'receiverPostcode': '40000',
            'weight': '1',
            'length': '10',
            'width': '10',
            'height': '10',
        }
        try:
            response = self._make_request('/order/price', payload)
        except ShippingGatewayError as e:
            logger.warning(f"J&T connection test failed: {e}")
            return False
        return isinstance(response, dict) and 'code' in response

    # ============ MAPPING ============

    @staticmethod
    def map_service_name(service_code: str) -> str:
        return SERVICE_NAMES.get(service_code, f"J&T Express ({service_code})")

    @staticmethod
    def estimate_delivery_days(service_code: str) -> int:
        return DELIVERY_DAYS.get(service_code, 5)

    @staticmethod
    def map_status(scan_type: Optional[str]) -> str:
        if scan_type is None:
            return 'unknown'
        return SCAN_STATUS_MAP.get(scan_type.upper(), 'in_transit')
