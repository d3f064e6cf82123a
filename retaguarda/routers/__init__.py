# retaguarda/routers/__init__.py

# Expõe os módulos para que "from retaguarda.routers import cash" funcione
from . import auth
from . import cash
from . import audits
from . import finance
from . import payment_methods
from . import recurring_bills
from . import reports
