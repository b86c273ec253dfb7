from .health import health_bp
from .auth import auth_bp
from .admin import admin_bp
from .audit_logs import audit_bp
from .screens import screens_bp
from .screen_bookings import screen_bookings_bp
from .invoices import invoices_bp
