from .api import ScreenAdsApi
from .cache import QueryCache
from .errors import ClientError, ApiError, ValidationError, WizardError, RequestInFlightError
from .invoices import InvoiceBoard, render_invoices
from .review import AdminReviewWorkflow
from .settings import ClientSettings
from .wizard import BookingWizard, BookingDraft, Step, transition
