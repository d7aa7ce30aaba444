# Supabase table: subscriptions
# One row per user; status is derived, never stored

"""
Expected Supabase table structure:
- user_id: uuid (primary key, references auth.users)
- plan: text ('monthly' | 'yearly' | legacy 'weekly')
- is_active: boolean
- valid_until: timestamp (nullable)
- autopay_enabled: boolean
- razorpay_subscription_id: text (nullable)
- expiry_email_sent: timestamp (nullable; set when the reminder goes out)
- created_at: timestamp
- updated_at: timestamp (set by Razorpay webhook events)
"""
