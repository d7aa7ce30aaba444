# Supabase table: settings
# Generic key/value store edited from the admin Settings panel

"""
Expected Supabase table structure:
- key: text (primary key)
- value: text (nullable)

Known keys:
- MAINTENANCE_MODE: 'on' | 'true' | '1' switches the storefront into maintenance
- RAZORPAY_KEY_ID, RAZORPAY_KEY_SECRET, RAZORPAY_CURRENCY
- RAZORPAY_MONTHLY_AMOUNT, RAZORPAY_YEARLY_AMOUNT (rupees or paise, see pricing.py)
"""
