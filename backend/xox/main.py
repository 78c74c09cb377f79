from flask import Blueprint, jsonify

main = Blueprint('main', __name__)


@main.route('/')
def index():
    return jsonify({'message': 'XOX game server is running'})


@main.route('/health')
def health():
    # Liveness probe for the hosting platform
    return jsonify({'status': 'OK', 'message': 'Game server is running'}), 200
