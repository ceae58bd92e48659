import logging
import uuid
from typing import Any, Dict, List, Optional

from flask import Flask, jsonify, request, session

from config import Settings, load_settings
from core.cart_provider import CartSessions
from database.connection import DatabaseConnection
from database.repository import MenuRepository, StorageRepository
from models.errors import ItemNotFound
from services.cart_service import CartService
from services.catalog_service import CatalogService
from services.checkout_service import CheckoutService
from services.order_client import BackendOrderClient

logger = logging.getLogger(__name__)


def _status_for(result: Dict[str, Any], ok: int = 200) -> int:
    if result.get("success"):
        return ok
    if result.get("not_found"):
        return 404
    if result.get("backend_error"):
        return 502
    return 400


def _optional_int(data: Dict[str, Any], name: str) -> Optional[int]:
    value = data.get(name)
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValueError(f"{name} must be an integer")
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value)
    if not isinstance(value, int):
        raise ValueError(f"{name} must be an integer")
    return value


def _optional_int_list(data: Dict[str, Any], name: str) -> List[int]:
    values = data.get(name)
    if values is None:
        return []
    if not isinstance(values, list):
        raise ValueError(f"{name} must be a list of integers")
    return [_optional_int({name: v}, name) for v in values if v is not None]


def _bearer_token() -> Optional[str]:
    header = request.headers.get("Authorization", "")
    if header.lower().startswith("bearer "):
        return header[7:].strip() or None
    return None


def _session_id() -> str:
    # Get or create session ID
    if 'session_id' not in session:
        session['session_id'] = str(uuid.uuid4())
    return session['session_id']


def create_app(settings: Optional[Settings] = None,
               order_client: Optional[BackendOrderClient] = None) -> Flask:
    """Build the Flask app and wire the cart services"""
    settings = settings or load_settings()

    app = Flask(__name__)
    app.secret_key = settings.secret_key

    db_connection = DatabaseConnection(settings.db_path)
    sessions = CartSessions(StorageRepository(db_connection), settings.cart_storage_key,
                            max_sessions=settings.max_cart_sessions)
    catalog_service = CatalogService(MenuRepository(db_connection))
    cart_service = CartService(sessions, catalog_service, settings.currency_symbol)
    if order_client is None:
        order_client = BackendOrderClient(settings.backend_api_url, timeout=settings.backend_timeout)
    checkout_service = CheckoutService(sessions, order_client, settings.currency_symbol)

    app.extensions["wildeats"] = {
        "settings": settings,
        "sessions": sessions,
        "catalog_service": catalog_service,
        "cart_service": cart_service,
        "checkout_service": checkout_service
    }

    @app.route('/health')
    def health():
        """Health check endpoint"""
        return jsonify({'status': 'ok', 'message': 'WildEats cart is running!'})

    @app.route('/api/menu-items/<int:item_id>/options')
    def menu_item_options(item_id: int):
        """Variants, add-ons and flavors for a menu item"""
        try:
            options = catalog_service.get_options(item_id)
        except ItemNotFound as e:
            return jsonify({'error': str(e)}), 404
        return jsonify(options.to_dict())

    @app.route('/api/cart', methods=['GET'])
    def get_cart():
        """Current session cart"""
        return jsonify(cart_service.get_cart_details(_session_id()))

    @app.route('/api/cart/items', methods=['POST'])
    def add_cart_item():
        """Add a menu item with its modifiers"""
        data = request.get_json(silent=True) or {}
        try:
            item_id = _optional_int(data, 'itemId')
            quantity = _optional_int(data, 'quantity')
            variant_id = _optional_int(data, 'variantId')
            flavor_id = _optional_int(data, 'flavorId')
            addon_ids = _optional_int_list(data, 'addonIds')
        except ValueError as e:
            return jsonify({'success': False, 'error': str(e)}), 400
        if item_id is None:
            return jsonify({'success': False, 'error': 'itemId is required.'}), 400

        result = cart_service.add_to_cart(
            _session_id(), item_id,
            quantity=1 if quantity is None else quantity,
            variant_id=variant_id,
            flavor_id=flavor_id,
            addon_ids=addon_ids,
            notes=data.get('notes')
        )
        return jsonify(result), _status_for(result, ok=201)

    @app.route('/api/cart/items/<key>', methods=['PATCH'])
    def update_cart_item(key: str):
        """Change quantity and/or notes of a cart line"""
        data = request.get_json(silent=True) or {}
        try:
            quantity = _optional_int(data, 'quantity')
        except ValueError as e:
            return jsonify({'success': False, 'error': str(e)}), 400

        result = cart_service.update_cart_item(_session_id(), key, new_quantity=quantity,
                                               notes=data.get('notes'))
        return jsonify(result), _status_for(result)

    @app.route('/api/cart/items/<key>', methods=['DELETE'])
    def remove_cart_item(key: str):
        """Remove a cart line (idempotent)"""
        return jsonify(cart_service.remove_cart_item(_session_id(), key))

    @app.route('/api/cart', methods=['DELETE'])
    def clear_cart():
        """Empty the cart"""
        return jsonify(cart_service.clear_cart(_session_id()))

    @app.route('/api/checkout', methods=['POST'])
    def checkout():
        """Place the order(s) for the session cart"""
        data = request.get_json(silent=True) or {}
        result = checkout_service.process_order(_session_id(), notes=data.get('notes'),
                                                token=_bearer_token())
        return jsonify(result), _status_for(result)

    @app.route('/api/clear-session', methods=['POST'])
    def clear_session():
        """Logout: reset the cart and clear the session"""
        if 'session_id' in session:
            cart_service.end_session(session['session_id'])
        session.clear()
        return jsonify({'message': 'Session has been reset.'})

    return app


if __name__ == '__main__':
    settings = load_settings()
    logging.basicConfig(
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        level=getattr(logging, settings.log_level, logging.INFO)
    )

    app = create_app(settings)

    logger.info("=== WildEats Cart Server ===")
    logger.info("Starting server on http://localhost:%d", settings.port)

    app.run(
        host='0.0.0.0',
        port=settings.port,
        debug=settings.debug
    )
