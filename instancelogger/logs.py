# Copyright 2026 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#      http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Local and GCP logging setup for processes that embed a Reporter."""

import logging
import sys

from google.cloud import logging as google_logging

_REPORTED_ERROR_TYPE = (
    'type.googleapis.com/'
    'google.devtools.clouderrorreporting.v1beta1.ReportedErrorEvent')
_LOCAL_FORMAT = '%(asctime)s %(levelname)s %(name)s: %(message)s'


class _ErrorReportingFilter:
  """
  Adds the json fields Error Reporting needs to pick up ERROR records that
  carry no exception.

  https://cloud.google.com/error-reporting/docs/formatting-error-messages#log-text
  """

  def __init__(self, service_name: str) -> None:
    self.service_name = service_name

  def filter(self, record: logging.LogRecord) -> bool:
    if not hasattr(record, 'json_fields'):
      record.json_fields = {}

    if record.levelno >= logging.ERROR and not record.exc_info:
      record.json_fields.update({
          '@type': _REPORTED_ERROR_TYPE,
          'serviceContext': {
              'service': self.service_name,
          },
          'context': {
              'reportLocation': {
                  'filePath': record.pathname,
                  'lineNumber': record.lineno,
                  'functionName': record.funcName,
              }
          },
      })

    return True


def setup_logging(service_name: str, use_cloud: bool = False) -> None:
  """Set up root logging.

  Locally this writes to stderr. With use_cloud, records are shipped to Cloud
  Logging and ERROR records are tagged for Error Reporting.
  """
  root = logging.getLogger()
  if use_cloud:
    logging_client = google_logging.Client()
    logging_client.setup_logging()
    root.addFilter(_ErrorReportingFilter(service_name))
  else:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(_LOCAL_FORMAT))
    root.addHandler(handler)

  root.setLevel(logging.INFO)

  # Suppress noisy logs in some of our dependencies.
  logging.getLogger('google.api_core.bidi').setLevel(logging.ERROR)
  logging.getLogger('google.cloud.pubsub_v1.publisher').setLevel(
      logging.WARNING)
