from .observer import Observer
from .observer_chain import ObserverChain
