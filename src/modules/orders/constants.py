"""Order domain constants.

Confirmation and fulfillment statuses are free-form: any value may follow
any other.  The only derived rule is that every update targeting
``CALL_NOT_RESPONSE`` counts one more call attempt.
"""

from datetime import timedelta

from django.db import models


class OrderKind(models.TextChoices):
    USB = "usb", "USB"
    COURSE = "course", "Course"


class ConfirmationStatus(models.TextChoices):
    CALL_CONFIRMED = "call_confirmed", "Call confirmed"
    CALL_NOT_RESPONSE = "call_not_response", "No response"
    PHONE_CLOSED = "phone_closed", "Phone closed"


class FulfillmentStatus(models.TextChoices):
    NOT_PROCESSED_YET = "not_processed_yet", "Not processed yet"
    USER_RESPONSE = "user_response", "User responded"
    USER_PHONE_CLOSED = "user_phone_closed", "User phone closed"
    RETRYING = "retrying", "Retrying"


class BuyerOutcome(models.TextChoices):
    SOLD = "sold", "Sold"
    INTERESTED_LATER = "interested_later", "Interested later"
    NOT_SOLD = "not_sold", "Not sold"


class PaymentMethod(models.TextChoices):
    ONLINE_PAYMENT = "online_payment", "Online payment"
    CASH_ON_DELIVERY = "cash_on_delivery", "Cash on delivery"


class ReasonNotSold(models.TextChoices):
    PRICE_HIGH = "price_high", "Price too high"
    NEEDS_TIME = "needs_time", "Needs time"
    AFRAID_SCAM = "afraid_scam", "Afraid of scam"
    NOT_INTERESTED = "not_interested", "Not interested"
    NO_DECISION = "no_decision", "No decision"
    OTHER = "other", "Other"


INITIAL_CONFIRMATION_STATUS = ConfirmationStatus.CALL_NOT_RESPONSE

# Both creation paths assume the client can be reached right away.
INITIAL_FULFILLMENT_STATUS = FulfillmentStatus.USER_RESPONSE

NORMALIZED_FULFILLMENT_STATUS = FulfillmentStatus.NOT_PROCESSED_YET

RECENT_ORDERS_WINDOW = timedelta(minutes=5)
