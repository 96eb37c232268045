"""Price catalog — machine and labor pricing, quote composition, admin data API."""
