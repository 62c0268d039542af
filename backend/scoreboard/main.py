from functools import wraps

from flask import Blueprint, request, jsonify
from flask_login import login_user, logout_user, login_required, current_user
from scoreboard import db
from scoreboard.models import User

main = Blueprint('main', __name__)

MIN_PASSCODE_LENGTH = 4


def admin_required(view):
    """Logged-in admin who has already replaced their initial passcode."""
    @wraps(view)
    @login_required
    def wrapped(*args, **kwargs):
        if not current_user.is_admin:
            return jsonify({'error': 'Forbidden - Admin access required'}), 403
        if current_user.needs_password_change:
            return jsonify({'error': 'Password change required'}), 403
        return view(*args, **kwargs)
    return wrapped


@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the scoreboard server!'})


@main.route('/login', methods=['POST'])
def login():
    data = request.get_json(silent=True) or {}
    user = User.query.filter_by(username=(data.get('username') or '').strip()).first()
    if user and user.check_passcode(data.get('passcode') or data.get('password')):
        login_user(user, remember=True)
        return jsonify({'message': 'Logged in successfully.', 'user': user.to_dict()})
    return jsonify({'error': 'Invalid username or passcode'}), 401


@main.route('/logout', methods=['POST'])
@login_required
def logout():
    logout_user()
    return jsonify({'message': 'Logged out successfully.'})


@main.route('/user')
def get_user():
    if not current_user.is_authenticated:
        return jsonify({'error': 'Not logged in'}), 401
    return jsonify(current_user.to_dict())


@main.route('/change-password', methods=['POST'])
@login_required
def change_password():
    data = request.get_json(silent=True) or {}
    current = data.get('current_passcode')
    new = data.get('new_passcode')
    if not current or not new:
        return jsonify({'error': 'Current and new passcode are required'}), 400
    if not current_user.check_passcode(current):
        return jsonify({'error': 'Current passcode is incorrect'}), 401
    if len(new) < MIN_PASSCODE_LENGTH:
        return jsonify({'error': f'Passcode must be at least {MIN_PASSCODE_LENGTH} characters'}), 400
    if new == current:
        return jsonify({'error': 'New passcode must differ from the current one'}), 400
    current_user.set_passcode(new)
    current_user.needs_password_change = False
    db.session.add(current_user)
    db.session.commit()
    return jsonify({'message': 'Passcode updated.', 'user': current_user.to_dict()})
