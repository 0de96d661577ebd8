"""Sample XML documents served by the mock transport in unit tests."""

API_URL = "http://cloud.test/api"

ENTRY_POINT_XML = f"""<?xml version="1.0" encoding="UTF-8"?>
<api driver="mock" version="0.1">
  <link rel="hardware_profiles" href="{API_URL}/hardware_profiles"/>
  <link rel="images" href="{API_URL}/images"/>
  <link rel="instances" href="{API_URL}/instances">
    <feature name="user_name"/>
    <feature name="hardware_profiles"/>
  </link>
  <link rel="keys" href="{API_URL}/keys"/>
  <link rel="instance_states" href="{API_URL}/instance_states"/>
</api>
"""

INSTANCE_XML = f"""<instance id="inst-1" href="{API_URL}/instances/inst-1">
  <name>web-1</name>
  <owner_id>mockuser</owner_id>
  <image id="img1" href="{API_URL}/images/img1"/>
  <hardware_profile id="m1-large" href="{API_URL}/hardware_profiles/m1-large"/>
  <state>RUNNING</state>
  <actions>
    <link rel="reboot" method="post" href="{API_URL}/instances/inst-1/reboot"/>
    <link rel="stop" method="post" href="{API_URL}/instances/inst-1/stop"/>
  </actions>
  <public_addresses>
    <address>inst-1.public.example.com</address>
  </public_addresses>
  <private_addresses>
    <address>inst-1.private.example.com</address>
    <address>10.0.0.5</address>
  </private_addresses>
</instance>"""

STOPPED_INSTANCE_XML = f"""<instance id="inst-1" href="{API_URL}/instances/inst-1">
  <name>web-1</name>
  <state>STOPPED</state>
  <actions>
    <link rel="start" method="post" href="{API_URL}/instances/inst-1/start"/>
    <link rel="destroy" method="post" href="{API_URL}/instances/inst-1/destroy"/>
  </actions>
</instance>"""

IMAGE_XML = f"""<image id="img1" href="{API_URL}/images/img1">
  <name>Fedora 10</name>
  <owner_id>fedoraproject</owner_id>
  <architecture>x86_64</architecture>
</image>"""

IMAGES_XML = f"""<images>
  {IMAGE_XML}
  <image id="img2" href="{API_URL}/images/img2">
    <name>Fedora 10</name>
    <architecture>i386</architecture>
  </image>
  <image id="img3" href="{API_URL}/images/img3">
    <name>JBoss</name>
    <architecture>i386</architecture>
  </image>
</images>"""

STATES_XML = """<states>
  <state name="start"><transition to="pending" action="create"/></state>
  <state name="pending"><transition to="running" auto="true"/></state>
  <state name="running">
    <transition to="running" action="reboot"/>
    <transition to="stopped" action="stop"/>
  </state>
  <state name="stopped">
    <transition to="running" action="start"/>
    <transition to="finish" action="destroy"/>
  </state>
  <state name="finish"/>
</states>"""

