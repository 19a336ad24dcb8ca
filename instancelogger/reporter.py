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
"""Reports application errors to a Google Cloud backend.

Create a Reporter, call initialize() with the topic to publish to, then call
report() with errors. Until initialize() succeeds, and after shutdown(),
errors only go to the local log. Call shutdown() when done.
"""
from __future__ import annotations

import logging
import sys
import threading
import traceback
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from . import backends
from . import metadata
from .backends import BackendConnectionError

NOT_INITIALIZED_TAG = "[ERROR:LOGGING-NOT-INIT'ED]"
PUBLISH_FAILED_TAG = '[ERROR:PUBLISH-FAILED]'
REPORTED_TAG = '[ERROR:REPORTED]'

_singleton: Optional[Reporter] = None


@dataclass
class ReportedError:
  """Message published for each reported error."""
  error: str
  trace: str
  instance_name: Optional[str] = None

  def to_json(self) -> Dict[str, Any]:
    return {
        'error': self.error,
        'trace': self.trace,
        'instanceName': self.instance_name,
    }


def _format_trace(error: BaseException) -> str:
  """The error's own traceback if it was raised, else the current stack."""
  if isinstance(error, BaseException) and error.__traceback__ is not None:
    lines = traceback.format_exception(
        type(error), error, error.__traceback__)
  else:
    lines = traceback.format_stack()[:-2]
  return ''.join(lines)


def _one_line(value: Any) -> str:
  return str(value).replace('\n', ' ')


class Reporter:
  """Forwards errors to a Pub/Sub topic or Cloud Logging log."""
  topic_name: Optional[str]
  instance_name: Optional[str]
  project_id: Optional[str]

  def __init__(self,
               project_id: Optional[str] = None,
               backend: Optional[backends.Backend] = None,
               backend_options: Optional[Dict[str, Any]] = None,
               wait_group=None,
               metadata_client: Optional[metadata.MetadataClient] = None,
               exit_func: Callable[[int], Any] = sys.exit) -> None:
    """Connects to the backend, without binding a topic yet.

    Args:
      project_id: Google Cloud project. Looked up from the metadata server
        when None.
      backend: where errors are published. Defaults to Pub/Sub.
      backend_options: keyword arguments for the backend's client, e.g.
        credentials or client_options.
      wait_group: optional counter with add() and done(), incremented for the
        duration of every report() call.
      metadata_client: client used for project and instance lookups.
      exit_func: called with the exit status by fatal().

    Raises:
      MetadataError, requests.exceptions.RequestException: a metadata lookup
        failed with anything other than a timeout.
      BackendConnectionError: the backend client could not be created.
    """
    self.topic_name = None
    self.instance_name = None
    self.project_id = project_id
    self._wait_group = wait_group
    self._exit_func = exit_func
    self._handle: Optional[backends.PublishHandle] = None
    self._connection: Optional[backends.Connection] = None
    self._stopped = False
    self._lock = threading.Lock()

    metadata_client = metadata_client or metadata.MetadataClient()
    if self.project_id is None:
      self.project_id = metadata.discover(metadata_client.project_id)

    backend = backend or backends.PubSubBackend()
    try:
      self._connection = backend.connect(self.project_id,
                                         **(backend_options or {}))
    except BackendConnectionError:
      raise
    except Exception as e:
      logging.exception('Failed to connect to backend for project %s',
                        self.project_id)
      raise BackendConnectionError(
          f'failed to connect to backend: {e}') from e

    if self.project_id is None and self._connection.project_id:
      logging.info('Publishing to project %s from the environment',
                   self._connection.project_id)

    try:
      self.instance_name = metadata.discover(metadata_client.instance_name)
    except Exception:
      self._connection.close()
      raise

  def __enter__(self) -> Reporter:
    return self

  def __exit__(self, *exc_info) -> None:
    self.shutdown()

  @property
  def initialized(self) -> bool:
    return self._handle is not None

  @property
  def backend_project_id(self) -> Optional[str]:
    """The project the backend publishes to.

    Differs from project_id when the backend resolved the project itself.
    """
    if self._connection is not None and self._connection.project_id:
      return self._connection.project_id
    return self.project_id

  def initialize(self,
                 topic_name: str,
                 instance_name: Optional[str] = None) -> None:
    """Starts publishing to topic_name.

    If this is not called, errors only go to the local log. Does nothing
    after shutdown().
    """
    with self._lock:
      if self._stopped:
        logging.error('Reporter has been shut down, not binding topic %s',
                      topic_name)
        return

      self.topic_name = topic_name
      if instance_name is not None:
        self.instance_name = instance_name

      if self._handle is not None:
        self._handle.stop()
        self._handle = None
      self._handle = self._connection.bind(topic_name)

  def report(self, error: BaseException) -> None:
    """Tries to publish the error, otherwise just logs it locally.

    Never raises.
    """
    if self._wait_group is not None:
      self._wait_group.add(1)
    try:
      self._report(error)
    finally:
      if self._wait_group is not None:
        self._wait_group.done()

  def _report(self, error: BaseException) -> None:
    # One line per report, the trace is in json_fields for Cloud Logging.
    handle = self._handle
    trace = _format_trace(error)
    if handle is None:
      logging.error('%s %s trace=%r', NOT_INITIALIZED_TAG, _one_line(error),
                    trace, extra={'json_fields': {'trace': trace}})
      return

    message = ReportedError(
        error=str(error), trace=trace, instance_name=self.instance_name)
    try:
      delivery_id = handle.publish(message.to_json())
    except Exception as e:
      logging.error('%s failed to publish %s to %s: %r', PUBLISH_FAILED_TAG,
                    _one_line(message.error), self.topic_name, e,
                    extra={'json_fields': message.to_json()})
      return

    logging.error('%s id=%s %s instanceName=%s', REPORTED_TAG, delivery_id,
                  _one_line(message.error), message.instance_name,
                  extra={'json_fields': message.to_json()})

  def fatal(self, error: BaseException, exit_code: int = 1) -> None:
    """Reports the error, flushes the backend and exits the process.

    The exit happens even if flushing fails.
    """
    try:
      self.report(error)
      self.shutdown()
    finally:
      self._exit_func(exit_code)

  def shutdown(self) -> None:
    """Stops the topic and closes the backend connection.

    Pending messages are flushed. Later calls do nothing.
    """
    with self._lock:
      if self._stopped:
        return
      self._stopped = True
      handle, self._handle = self._handle, None
      connection, self._connection = self._connection, None

    try:
      if handle is not None:
        handle.stop()
    finally:
      if connection is not None:
        connection.close()


def new_singleton(**kwargs) -> Reporter:
  """Creates a Reporter and stores it as the process-wide instance.

  Convenient if you want one Reporter for the whole app. Takes the same
  arguments as Reporter.
  """
  global _singleton
  _singleton = Reporter(**kwargs)
  return _singleton


def singleton() -> Optional[Reporter]:
  """Returns the Reporter created by new_singleton(), if any."""
  return _singleton
