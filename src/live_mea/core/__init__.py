"""Live MEA core package.

 - :mod:`frame` decodes the frames sent by the service into electrode matrices.
 - :mod:`recorder` sequences sessions to record several frames.
 - :mod:`samples` contains :class:`samples.LiveData` and
   :class:`samples.Recording`, which are used to represent recorded data.
 - :mod:`session` implements the session that connects, selects the device and
   waits for one frame.
 - :mod:`transport` contains the event based transports, mainly
   :class:`transport.SocketIOTransport`.
"""
