from flask import Blueprint, jsonify, request

import storage
from auth_utils import login_required
from forms import StockItemForm, StockTransactionForm, validate_form
from models import StockItem

stock_bp = Blueprint('stock', __name__, url_prefix='/api/stock')


@stock_bp.route('/items', methods=['GET'])
@login_required
def items():
    return jsonify([item.to_dict() for item in storage.list_active(StockItem)])


@stock_bp.route('/items/low', methods=['GET'])
@login_required
def low_items():
    return jsonify([item.to_dict() for item in storage.get_low_stock_items()])


@stock_bp.route('/items', methods=['POST'])
@login_required
def add_item():
    form = validate_form(StockItemForm)
    item = storage.create(StockItem, form.values())
    return jsonify(item.to_dict()), 201


@stock_bp.route('/items/<int:id>', methods=['PUT'])
@login_required
def edit_item(id):
    form = validate_form(StockItemForm, partial=True)
    item = storage.update(StockItem, id, form.values())
    return jsonify(item.to_dict())


@stock_bp.route('/items/<int:id>', methods=['DELETE'])
@login_required
def delete_item(id):
    storage.deactivate(StockItem, id)
    return jsonify({"message": "Item deleted"})


@stock_bp.route('/items/<int:id>/price-history', methods=['GET'])
@login_required
def price_history(id):
    return jsonify([t.to_dict() for t in storage.get_price_history(id)])


@stock_bp.route('/transactions', methods=['GET'])
@login_required
def transactions():
    rows = storage.get_stock_transactions(request.args.get('itemId', type=int))
    return jsonify([t.to_dict() for t in rows])


@stock_bp.route('/transactions', methods=['POST'])
@login_required
def add_transaction():
    form = validate_form(StockTransactionForm)
    transaction = storage.record_stock_transaction(form.values())
    return jsonify(transaction.to_dict()), 201
