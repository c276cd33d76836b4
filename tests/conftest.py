import sys
from pathlib import Path

import pytest

from yq_provider.command import YqCommand
from yq_provider.config import ProviderConfig

FAKE_YQ = Path(__file__).with_name("fake_yq.py")

DEPLOYMENT_LATEST = """\
apiVersion: apps/v1
kind: Deployment
metadata:
  name: web
spec:
  template:
    spec:
      containers:
        - name: web
          image: nginx:latest
"""

DEPLOYMENT_PINNED = """\
spec:
  template:
    spec:
      containers:
        - image: nginx:1.21
"""


@pytest.fixture
def fake_command():
    return YqCommand.create(sys.executable, args=[str(FAKE_YQ)])


@pytest.fixture
def make_config():
    def _make(location, **overrides):
        config = ProviderConfig(
            location=Path(location),
            yq_path=sys.executable,
            yq_args=(str(FAKE_YQ),),
        )
        for key, value in overrides.items():
            setattr(config, key, value)
        return config

    return _make
