# lesionlog/services/notification_service.py
import base64
import os
from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Attachment, Disposition, FileContent, FileName, FileType
from sendgrid.helpers.mail import Mail as SendGridMail
from ..utils.exceptions import InternalError
from ..utils.logger import setup_logger

class NotificationService:
    """Mail sender built once by create_app and handed to the services that need it."""

    def __init__(self, api_key, from_email):
        self.api_key = api_key
        self.from_email = from_email
        self.client = SendGridAPIClient(api_key) if api_key else None
        self.logger = setup_logger()

    def send(self, to_email, subject, text=None, html=None, attachment_path=None, attachment_name=None,
             attachment_type='application/pdf'):
        """Service: Send one email, optionally with a file attached

        Raises InternalError when the transport is not configured or the send fails.
        """
        if self.client is None or not self.from_email:
            self.logger.error(f"Service: SendGrid not configured, cannot mail {to_email}")
            raise InternalError("Mail transport is not configured")

        message = SendGridMail(
            from_email=self.from_email,
            to_emails=to_email,
            subject=subject,
            plain_text_content=text,
            html_content=html
        )

        if attachment_path:
            with open(attachment_path, 'rb') as f:
                encoded = base64.b64encode(f.read()).decode()
            message.attachment = Attachment(
                FileContent(encoded),
                FileName(attachment_name or os.path.basename(attachment_path)),
                FileType(attachment_type),
                Disposition('attachment')
            )

        try:
            response = self.client.send(message)
        except Exception as e:
            self.logger.error(f"Service: Error sending email to {to_email}: {str(e)}")
            raise InternalError(f"Failed to send email: {str(e)}")

        self.logger.info(f"Service: Email sent to {to_email}, status: {response.status_code}")
        return response.status_code
