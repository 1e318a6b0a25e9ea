"""EtherCAT slave modelling: PDO channels, SDO entries, sync managers, CiA 402 drives and SDO data conversion."""

__version__ = "0.1.0"