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
"""GCE metadata server lookups for project and instance identity."""

from __future__ import annotations

import logging
import os
from typing import Callable, Optional

import requests

METADATA_HOST_ENV = 'GCE_METADATA_HOST'
DEFAULT_METADATA_HOST = 'metadata.google.internal'
DEFAULT_TIMEOUT_SECONDS = 2
DEFAULT_USER_AGENT = 'instancelogger'

PROJECT_ID_PATH = 'computeMetadata/v1/project/project-id'
INSTANCE_NAME_PATH = 'computeMetadata/v1/instance/name'


class MetadataError(Exception):
  """Exception raised when the metadata server does not answer with a 200."""
  response: requests.Response

  def __init__(self, response: requests.Response):
    self.response = response
    super().__init__(f'{response.status_code} Metadata Error: '
                     f'{response.reason} for url: {response.request.url}')


class MetadataClient:
  """Client for the GCE instance metadata server."""
  host: str
  timeout: float
  user_agent: str

  def __init__(self,
               host: Optional[str] = None,
               timeout: float = DEFAULT_TIMEOUT_SECONDS,
               user_agent: str = DEFAULT_USER_AGENT) -> None:
    self.host = (host or os.getenv(METADATA_HOST_ENV) or
                 DEFAULT_METADATA_HOST)
    self.timeout = timeout
    self.user_agent = user_agent

  def get(self, path: str) -> str:
    """Retrieves a metadata value.

    Args:
      path: path under the metadata server root, e.g.
        computeMetadata/v1/instance/name.

    Returns:
      the value, with surrounding whitespace stripped.

    Raises:
      MetadataError on a non-200 HTTP response.
      requests.exceptions.Timeout if the server does not answer in time.
      requests.exceptions.RequestException on any other transport failure.
    """
    url = f'http://{self.host}/{path}'
    with requests.Session() as session:
      session.headers.update({
          'Metadata-Flavor': 'Google',
          'User-Agent': self.user_agent,
      })
      response = session.get(url, timeout=self.timeout)

    if response.status_code != 200:
      raise MetadataError(response)

    return response.text.strip()

  def project_id(self) -> str:
    return self.get(PROJECT_ID_PATH)

  def instance_name(self) -> str:
    return self.get(INSTANCE_NAME_PATH)


def discover(lookup: Callable[[], str]) -> Optional[str]:
  """Run a metadata lookup, treating a timeout as an unknown value.

  Any failure other than a timeout propagates to the caller.
  """
  try:
    return lookup()
  except requests.exceptions.Timeout:
    logging.info('Metadata lookup %s timed out, leaving value unset',
                 getattr(lookup, '__name__', lookup))
    return None
