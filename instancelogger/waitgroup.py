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
"""Completion counter for waiting on in-flight reports."""

import threading
from typing import Optional


class WaitGroup:
  """Counts outstanding operations and lets an owner wait for them.

  Pass one to a Reporter to be able to block until every report call has
  finished, e.g. before exiting the process.
  """

  def __init__(self) -> None:
    self._count = 0
    self._cond = threading.Condition()

  @property
  def count(self) -> int:
    with self._cond:
      return self._count

  def add(self, n: int = 1) -> None:
    with self._cond:
      if self._count + n < 0:
        raise ValueError('negative WaitGroup counter')
      self._count += n
      if self._count == 0:
        self._cond.notify_all()

  def done(self) -> None:
    self.add(-1)

  def wait(self, timeout: Optional[float] = None) -> bool:
    """Block until the counter reaches zero.

    Returns False if the timeout expired first.
    """
    with self._cond:
      return self._cond.wait_for(lambda: self._count == 0, timeout=timeout)
