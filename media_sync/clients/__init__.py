# Client packages
from .s3_gateway import StorageGateway, S3Object, ObjectListing
from .media_directory import MediaDirectory
from .report_api import SyncReportAPI, ReportAPIError

__all__ = ['StorageGateway', 'S3Object', 'ObjectListing', 'MediaDirectory', 'SyncReportAPI', 'ReportAPIError']
