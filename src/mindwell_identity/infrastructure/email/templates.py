"""Transactional email templates.

Each template is rendered with ``str.format``; HTML bodies receive
HTML-escaped parameters.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class EmailTemplate:
    subject: str
    text: str
    html: str


VERIFICATION_EMAIL = EmailTemplate(
    subject="Verify Your MindWell Account",
    text="""Welcome, {name}!

Thank you for joining MindWell. To complete your account setup, verify your
email address with this code:

    {code}

The code expires in {ttl_minutes} minutes. If you didn't create an account
with MindWell, you can safely ignore this email.

-- MindWell
""",
    html="""
<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
</head>
<body style="font-family: Arial, sans-serif; background-color: #f9fafb; margin: 0; padding: 20px;">
    <div style="max-width: 600px; margin: 0 auto; background-color: #ffffff; border-radius: 8px; padding: 40px;">
        <h2 style="color: #333; margin-top: 0;">Welcome, {name}!</h2>
        <p style="color: #666; line-height: 1.6;">Thank you for joining MindWell. To complete your account setup, please verify your email address using the code below:</p>
        <div style="background: #F8F9FF; border: 2px dashed #6B73FF; border-radius: 12px; padding: 30px; text-align: center; margin: 30px 0;">
            <h1 style="color: #6B73FF; margin: 0; font-size: 36px; letter-spacing: 8px; font-family: monospace;">{code}</h1>
        </div>
        <p style="color: #666; line-height: 1.6;">This code will expire in {ttl_minutes} minutes. If you didn't create an account with MindWell, please ignore this email.</p>
        <p style="color: #999; font-size: 12px; margin-top: 40px;">This email was sent to {email}.</p>
    </div>
</body>
</html>
""",
)

PASSWORD_RESET_EMAIL = EmailTemplate(
    subject="Reset Your MindWell Password",
    text="""Hi {name},

We received a request to reset the password for your MindWell account.

Open the link below to choose a new password (valid for {ttl_minutes} minutes):
{reset_link}

If you didn't request this, you can safely ignore this email.

-- MindWell
""",
    html="""
<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
</head>
<body style="font-family: Arial, sans-serif; background-color: #f9fafb; margin: 0; padding: 20px;">
    <div style="max-width: 600px; margin: 0 auto; background-color: #ffffff; border-radius: 8px; padding: 40px;">
        <h2 style="color: #333; margin-top: 0;">Password Reset Request</h2>
        <p style="color: #666; line-height: 1.6;">Hi {name}, we received a request to reset the password for your MindWell account.</p>
        <p style="margin: 30px 0; text-align: center;">
            <a href="{reset_link}" style="display: inline-block; padding: 14px 28px; background-color: #6B73FF; color: #ffffff !important; text-decoration: none; border-radius: 12px; font-weight: bold;">Reset Password</a>
        </p>
        <p style="color: #666; line-height: 1.6;">This link will expire in {ttl_minutes} minutes. If you didn't request a password reset, please ignore this email.</p>
        <p style="color: #999; font-size: 14px;">If the button doesn't work, copy and paste this link into your browser:</p>
        <p style="word-break: break-all; color: #6B73FF; font-size: 14px;">{reset_link}</p>
        <p style="color: #999; font-size: 12px; margin-top: 40px;">This email was sent to {email}.</p>
    </div>
</body>
</html>
""",
)
