def _iso(value):
    return value.isoformat() if value else None


def _money(value):
    return str(value) if value is not None else None


def pricing_option_json(o):
    return {
        "id": o.id,
        "locationId": o.location_id,
        "pricingType": o.pricing_type,
        "pricePerUnit": _money(o.price_per_unit),
        "durationHours": o.duration_hours,
        "notes": o.notes,
        "notesAr": o.notes_ar,
        "isActive": o.is_active,
    }


def location_json(loc, include_pricing=False):
    out = {
        "id": loc.id,
        "name": loc.name,
        "nameAr": loc.name_ar,
        "address": loc.address,
        "addressAr": loc.address_ar,
        "city": loc.city,
        "cityAr": loc.city_ar,
        "neighborhood": loc.neighborhood,
        "neighborhoodAr": loc.neighborhood_ar,
        "screenType": loc.screen_type,
        "numberOfScreens": loc.number_of_screens,
        "dailyPrice": _money(loc.daily_price),
        "isActive": loc.is_active,
    }
    if include_pricing:
        out["pricingOptions"] = [
            pricing_option_json(o) for o in loc.pricing_options if o.is_active
        ]
    return out


def merchant_json(user):
    if user is None:
        return None
    return {
        "id": user.id,
        "email": user.email,
        "name": user.display_name,
    }


def booking_json(b):
    return {
        "id": b.id,
        "merchantId": b.merchant_id,
        "merchant": merchant_json(b.merchant),
        "locationId": b.location_id,
        "location": {"id": b.location.id, "name": b.location.name, "nameAr": b.location.name_ar}
        if b.location else None,
        "pricingOptionId": b.pricing_option_id,
        "pricingType": b.pricing_option.pricing_type if b.pricing_option else None,
        "startDateTime": _iso(b.start_datetime),
        "endDateTime": _iso(b.end_datetime),
        "duration": b.duration,
        "totalPrice": _money(b.total_price),
        "status": b.status,
        "mediaUrl": b.media_url,
        "mediaType": b.media_type,
        "requestNotes": b.request_notes,
        "requestNotesAr": b.request_notes_ar,
        "adminNotes": b.admin_notes,
        "rejectionReason": b.rejection_reason,
        "approvedAt": _iso(b.approved_at),
        "rejectedAt": _iso(b.rejected_at),
        "invoiceGenerated": b.invoice_generated,
        "invoiceNumber": b.invoice_number,
        "createdAt": _iso(b.created_at),
    }


def invoice_json(inv):
    return {
        "id": inv.id,
        "invoiceNumber": inv.invoice_number,
        "bookingId": inv.booking_id,
        "merchantId": inv.merchant_id,
        "merchant": merchant_json(inv.merchant),
        "issueDate": _iso(inv.issue_date),
        "dueDate": _iso(inv.due_date),
        "subtotal": _money(inv.subtotal),
        "taxAmount": _money(inv.tax_amount),
        "totalAmount": _money(inv.total_amount),
        "currency": inv.currency,
        "status": inv.status,
        "paidAt": _iso(inv.paid_at),
    }
