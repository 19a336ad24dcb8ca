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
"""Publishing backends: Pub/Sub topics and Cloud Logging logs."""
from __future__ import annotations

import json
import logging
import uuid
from typing import Any, Dict, Optional

from google.cloud import logging as google_logging
from google.cloud import pubsub_v1

from . import utils

DEFAULT_PUBLISH_TIMEOUT_SECONDS = 60


class BackendConnectionError(Exception):
  """Raised when a backend client cannot be created."""


class PublishHandle:
  """A channel bound to a single topic or log."""

  def publish(self, payload: Dict[str, Any]) -> str:
    """Publish the payload, returning the backend's delivery id."""
    raise NotImplementedError

  def stop(self) -> None:
    raise NotImplementedError


class Connection:
  """A backend session scoped to one project."""
  project_id: Optional[str] = None

  def bind(self, topic_name: str) -> PublishHandle:
    raise NotImplementedError

  def close(self) -> None:
    raise NotImplementedError


class Backend:
  """Backend interface"""

  def connect(self, project_id: Optional[str], **options) -> Connection:
    raise NotImplementedError


class _PubSubHandle(PublishHandle):
  """Publishes JSON messages to one Pub/Sub topic."""

  def __init__(self, publisher: pubsub_v1.PublisherClient, topic: str,
               timeout: float) -> None:
    self.topic = topic
    self._publisher = publisher
    self._timeout = timeout

  def publish(self, payload: Dict[str, Any]) -> str:
    data = json.dumps(payload).encode('utf-8')
    future = self._publisher.publish(self.topic, data)
    return future.result(timeout=self._timeout)

  def stop(self) -> None:
    # Batches are per client, they are flushed when the connection closes.
    pass


class _PubSubConnection(Connection):
  """Pub/Sub publisher client for a project."""

  def __init__(self, publisher: pubsub_v1.PublisherClient, project_id: str,
               timeout: float) -> None:
    self.project_id = project_id
    self._publisher = publisher
    self._timeout = timeout

  def bind(self, topic_name: str) -> PublishHandle:
    topic = self._publisher.topic_path(self.project_id, topic_name)
    return _PubSubHandle(self._publisher, topic, self._timeout)

  def close(self) -> None:
    self._publisher.stop()


class PubSubBackend(Backend):
  """Publishes reported errors as messages on a Pub/Sub topic."""

  def __init__(self,
               publish_timeout: float = DEFAULT_PUBLISH_TIMEOUT_SECONDS) -> None:
    self.publish_timeout = publish_timeout

  def connect(self, project_id: Optional[str], **options) -> Connection:
    project_id = project_id or utils.get_google_cloud_project()
    if not project_id:
      logging.error('Google Cloud project unknown, cannot create publisher')
      raise BackendConnectionError('Google Cloud project not set')

    publisher = pubsub_v1.PublisherClient(**options)
    return _PubSubConnection(publisher, project_id, self.publish_timeout)


class _LoggerHandle(PublishHandle):
  """Writes structured ERROR entries to one Cloud Logging log."""

  def __init__(self, logger: google_logging.Logger) -> None:
    self._logger = logger

  def publish(self, payload: Dict[str, Any]) -> str:
    insert_id = uuid.uuid4().hex
    self._logger.log_struct(payload, severity='ERROR', insert_id=insert_id)
    return insert_id

  def stop(self) -> None:
    pass


class _LoggingConnection(Connection):
  """Cloud Logging client for a project."""

  def __init__(self, client: google_logging.Client) -> None:
    self._client = client
    self.project_id = client.project

  def bind(self, topic_name: str) -> PublishHandle:
    return _LoggerHandle(self._client.logger(topic_name))

  def close(self) -> None:
    self._client.close()


class CloudLoggingBackend(Backend):
  """Writes reported errors as structured entries to a Cloud Logging log."""

  def connect(self, project_id: Optional[str], **options) -> Connection:
    # The client infers the project from the environment when None.
    client = google_logging.Client(project=project_id, **options)
    return _LoggingConnection(client)
