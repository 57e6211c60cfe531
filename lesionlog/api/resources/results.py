# lesionlog/api/resources/results.py
import io
from flask import g, send_file
from flask_restful import Resource, reqparse
from ..middleware import auth_required
from ...services.report_service import ReportService
from ...services.result_service import ResultService
from ...services.statistics_service import StatisticsService
from ...utils.params import JSONBody, parse_page

def _as_is(value):
    return value

def _page_args():
    parser = reqparse.RequestParser()
    parser.add_argument('page', type=str, location='args')
    parser.add_argument('limit', type=str, location='args')
    args = parser.parse_args()
    return parse_page(args['page'], args['limit'])

def _range_args():
    parser = reqparse.RequestParser()
    parser.add_argument('startDate', type=str, location='args')
    parser.add_argument('endDate', type=str, location='args')
    args = parser.parse_args()
    return args['startDate'], args['endDate']

class Results(Resource):
    @auth_required()
    def post(self):
        """Controller: Store a prediction result for the current user"""
        parser = reqparse.RequestParser()
        parser.add_argument('confidence', type=_as_is, location='json')
        parser.add_argument('prediction', type=_as_is, location='json')
        args = parser.parse_args(req=JSONBody())

        result = ResultService().create(args['confidence'], args['prediction'], g.principal['user_id'])
        return {"success": True, "message": "Result created successfully.", "data": result}, 201

    @auth_required(role='admin')
    def get(self):
        """Controller: All results, paginated"""
        page, page_size = _page_args()
        payload = ResultService().list_all(page, page_size)
        return {"success": True, "message": "Results retrieved successfully.", **payload}, 200

class MyResults(Resource):
    @auth_required()
    def get(self):
        page, page_size = _page_args()
        payload = ResultService().list_by_owner(g.principal['user_id'], page, page_size)
        return {"success": True, "message": "User results retrieved successfully.", **payload}, 200

class UserResults(Resource):
    @auth_required(role='admin')
    def get(self, user_id):
        payload = ResultService().list_by_owner_id(user_id)
        return {"success": True, "message": "Results retrieved successfully.", **payload}, 200

class ResultsByPrediction(Resource):
    @auth_required(role='admin')
    def get(self, text):
        page, page_size = _page_args()
        payload = ResultService().list_by_prediction_substring(text, page, page_size)
        return {
            "success": True,
            "message": f"Results for prediction '{text}' retrieved successfully.",
            **payload
        }, 200

class ResultsByDate(Resource):
    @auth_required(role='admin')
    def get(self):
        """Controller: Results inside whole-day date bounds"""
        start_date, end_date = _range_args()
        page, page_size = _page_args()
        payload = ResultService().list_by_date_range(start_date, end_date, page, page_size)
        return {"success": True, "message": "Results retrieved successfully.", **payload}, 200

class Statistics(Resource):
    @auth_required(role='admin')
    def get(self):
        start_date, end_date = _range_args()
        statistics = StatisticsService().get_statistics(start_date, end_date)
        return {"success": True, "message": "Statistics retrieved successfully.", "data": statistics}, 200

class TimeBasedStatistics(Resource):
    @auth_required(role='admin')
    def get(self, period):
        data = StatisticsService().get_time_based_statistics(period)
        return {
            "success": True,
            "message": f"{period.capitalize()} statistics retrieved successfully.",
            "data": data
        }, 200

class DownloadReport(Resource):
    @auth_required(role='admin')
    def get(self):
        """Controller: Stream the PDF report as an attachment"""
        start_date, end_date = _range_args()
        content, filename = ReportService().render_report(start_date, end_date)
        return send_file(
            io.BytesIO(content),
            mimetype='application/pdf',
            as_attachment=True,
            download_name=filename
        )

class EmailReport(Resource):
    def __init__(self, mailer=None):
        self.mailer = mailer

    @auth_required(role='admin')
    def post(self):
        """Controller: Mail the PDF report to the requesting admin"""
        parser = reqparse.RequestParser()
        parser.add_argument('startDate', type=str, location='json')
        parser.add_argument('endDate', type=str, location='json')
        args = parser.parse_args(req=JSONBody())

        sent = ReportService(mailer=self.mailer).email_report(
            args['startDate'], args['endDate'], g.principal['user_id']
        )
        return {"success": True, "message": f"Report sent to {sent['recipient']}.", "data": sent}, 200
