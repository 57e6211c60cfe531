# lesionlog/services/report_service.py
import io
import os
import tempfile
from datetime import datetime
from flask import current_app
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas
from ..repositories.result_repository import ResultRepository
from ..repositories.user_repository import UserRepository
from ..utils.exceptions import InternalError, NotFoundError
from ..utils.logger import setup_logger
from ..utils.params import day_bounds
from .user_service import UserService

PAGE_WIDTH, PAGE_HEIGHT = A4
MARGIN = 40
LINE_HEIGHT = 16
ROW_HEIGHT = 18
# Date, Prediction, Confidence %, Username
TABLE_COLUMNS = (("Date", 40), ("Prediction", 170), ("Confidence %", 340), ("Username", 430))

class ReportService:
    def __init__(self, mailer=None):
        self.repository = ResultRepository()
        self.user_repository = UserRepository()
        self.user_service = UserService()
        self.mailer = mailer
        self.logger = setup_logger()

    def collect(self, start_date, end_date=None):
        """Service: Rows and aggregates that go into one report"""
        start, end = day_bounds(start_date, end_date)
        total = self.repository.count(start, end)
        if total == 0:
            raise NotFoundError("No results found for the selected date range.")

        results = self.repository.list_results(
            start=start, end=end, limit=current_app.config['REPORT_FETCH_LIMIT']
        )
        breakdown = [
            {
                "prediction": row.prediction,
                "count": row.result_count,
                "percentage": round(row.result_count / total * 100, 1)
            }
            for row in self.repository.group_by_prediction(start, end)
        ]
        return {
            "startDate": start.date().isoformat(),
            "endDate": end.date().isoformat(),
            "generatedAt": datetime.utcnow(),
            "userStats": self.user_service.role_statistics(),
            "totalResults": total,
            "breakdown": breakdown,
            "results": results
        }

    @staticmethod
    def filename(report):
        return f"results-report-{report['startDate']}-to-{report['endDate']}.pdf"

    def build_pdf(self, report):
        """Service: Draw the report into an in-memory PDF and return its bytes"""
        buffer = io.BytesIO()
        pdf = canvas.Canvas(buffer, pagesize=A4)
        pdf.setTitle("Prediction Results Report")
        y = PAGE_HEIGHT - MARGIN

        pdf.setFont("Helvetica-Bold", 18)
        pdf.drawString(MARGIN, y, "Prediction Results Report")
        y -= LINE_HEIGHT * 2

        pdf.setFont("Helvetica", 11)
        pdf.drawString(MARGIN, y, f"Date Range: {report['startDate']} to {report['endDate']}")
        y -= LINE_HEIGHT
        pdf.drawString(MARGIN, y, f"Generated: {report['generatedAt'].strftime('%Y-%m-%d %H:%M:%S')} UTC")
        y -= LINE_HEIGHT * 2

        stats = report['userStats']
        y = self._block(pdf, y, "User Statistics", [
            f"Total Users: {stats['totalUsers']}",
            f"Admins: {stats['adminCount']} ({stats['adminPercentage']}%)",
            f"Users: {stats['userCount']} ({stats['userPercentage']}%)"
        ])

        summary_lines = [f"Total Results: {report['totalResults']}"]
        summary_lines += [
            f"{item['prediction']}: {item['count']} ({item['percentage']}%)" for item in report['breakdown']
        ]
        y = self._block(pdf, y, "Results Summary", summary_lines)

        table_limit = current_app.config['REPORT_TABLE_ROWS']
        y = self._table_header(pdf, y)
        pdf.setFont("Helvetica", 10)
        for result in report['results'][:table_limit]:
            if y < MARGIN + ROW_HEIGHT:
                pdf.showPage()
                y = self._table_header(pdf, PAGE_HEIGHT - MARGIN)
                pdf.setFont("Helvetica", 10)
            username = result.user.username if result.user else "Unknown"
            cells = (
                result.created_at.strftime('%Y-%m-%d %H:%M'),
                result.prediction[:30],
                f"{result.confidence:.2f}",
                username[:25]
            )
            for (_, x), text in zip(TABLE_COLUMNS, cells):
                pdf.drawString(x, y, text)
            y -= ROW_HEIGHT

        if report['totalResults'] > table_limit:
            if y < MARGIN + LINE_HEIGHT:
                pdf.showPage()
                y = PAGE_HEIGHT - MARGIN
            pdf.setFont("Helvetica-Oblique", 9)
            pdf.drawString(
                MARGIN, y - 4,
                f"Showing the first {table_limit} of {report['totalResults']} matching results."
            )

        pdf.showPage()
        pdf.save()
        return buffer.getvalue()

    @staticmethod
    def _block(pdf, y, title, lines):
        pdf.setFont("Helvetica-Bold", 13)
        pdf.drawString(MARGIN, y, title)
        y -= LINE_HEIGHT
        pdf.setFont("Helvetica", 11)
        for line in lines:
            if y < MARGIN + LINE_HEIGHT:
                pdf.showPage()
                y = PAGE_HEIGHT - MARGIN
                pdf.setFont("Helvetica", 11)
            pdf.drawString(MARGIN + 10, y, line)
            y -= LINE_HEIGHT
        return y - LINE_HEIGHT

    @staticmethod
    def _table_header(pdf, y):
        if y < MARGIN + ROW_HEIGHT * 2:
            pdf.showPage()
            y = PAGE_HEIGHT - MARGIN
        pdf.setFont("Helvetica-Bold", 10)
        for title, x in TABLE_COLUMNS:
            pdf.drawString(x, y, title)
        pdf.line(MARGIN, y - 4, PAGE_WIDTH - MARGIN, y - 4)
        return y - ROW_HEIGHT

    def render_report(self, start_date, end_date=None):
        """Service: PDF bytes and download filename for a date range"""
        report = self.collect(start_date, end_date)
        content = self.build_pdf(report)
        self.logger.info(f"Service: Rendered report {self.filename(report)} ({len(content)} bytes)")
        return content, self.filename(report)

    def email_report(self, start_date, end_date, recipient_id):
        """Service: Mail the report to the requesting user's registered address"""
        recipient = self.user_repository.get_user_by_id(recipient_id)
        if not recipient:
            raise NotFoundError("User not found.")
        if self.mailer is None:
            raise InternalError("Mail transport is not configured")

        content, filename = self.render_report(start_date, end_date)

        # Transient copy for the attachment, removed whether or not the send succeeds
        handle, path = tempfile.mkstemp(suffix='.pdf', prefix='results-report-')
        try:
            with os.fdopen(handle, 'wb') as f:
                f.write(content)
            self.mailer.send(
                recipient.email,
                "Prediction Results Report",
                text=f"Hi {recipient.username},\n\nYour requested results report is attached.\n",
                attachment_path=path,
                attachment_name=filename
            )
        finally:
            os.remove(path)

        self.logger.info(f"Service: Report {filename} emailed to {recipient.email}")
        return {"filename": filename, "recipient": recipient.email}
