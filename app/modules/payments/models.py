# Supabase tables: orders, order_items
# Written after a verified Razorpay checkout

"""
Expected Supabase table structure:

orders:
- id: uuid (primary key)
- user_id: uuid (references auth.users)
- total: numeric
- status: text ('paid')
- billing_name, billing_email, billing_mobile, billing_company: text (nullable)
- created_at: timestamp

order_items:
- id: uuid (primary key)
- order_id: uuid (references orders)
- slug: text (template slug)
- name: text
- price: numeric
- quantity: integer
- img: text
"""
